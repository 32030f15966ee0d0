from uuid import NAMESPACE_URL, uuid4, uuid5

from gameswap.database import database
from gameswap.models.db.slot import Slot, SlotInsertable
from gameswap.utils.id_types import LeagueId, SlotId


def build_slot_id(slot: SlotInsertable) -> SlotId:
    # Deterministic so re-importing the same CSV updates rows instead of duplicating them.
    natural_key = "|".join(
        (
            slot.league_id.lower(),
            slot.division.lower(),
            slot.offering_team_id,
            slot.game_date,
            slot.start_time,
            slot.end_time,
            slot.park_code,
            slot.field_code,
        )
    )
    return SlotId(uuid5(NAMESPACE_URL, natural_key).hex)


async def get_slots_for_field_and_date(
    league_id: LeagueId, division: str, park_code: str, field_code: str, game_date: str
) -> list[Slot]:
    query = """
        SELECT *
        FROM slots
        WHERE league_id = :league_id
          AND lower(division) = lower(:division)
          AND park_code = :park_code
          AND field_code = :field_code
          AND game_date = :game_date
        ORDER BY start_minutes ASC
        """
    result = await database.fetch_all(
        query=query,
        values={
            "league_id": league_id,
            "division": division,
            "park_code": park_code,
            "field_code": field_code,
            "game_date": game_date,
        },
    )
    return [Slot.model_validate(dict(row._mapping)) for row in result]


async def upsert_slot(slot: SlotInsertable) -> SlotId:
    slot_id = build_slot_id(slot)
    await database.execute(
        """
        INSERT INTO slots (
            id, league_id, division, offering_team_id, offering_email, game_date,
            start_time, end_time, start_minutes, end_minutes, field_key_raw,
            park_code, field_code, game_type, status, notes, created_by, created
        )
        VALUES (
            :id, :league_id, :division, :offering_team_id, :offering_email, :game_date,
            :start_time, :end_time, :start_minutes, :end_minutes, :field_key_raw,
            :park_code, :field_code, :game_type, :status, :notes, :created_by, :created
        )
        ON CONFLICT (id) DO UPDATE
        SET offering_email = EXCLUDED.offering_email,
            game_type = EXCLUDED.game_type,
            status = EXCLUDED.status,
            notes = EXCLUDED.notes
        """,
        values={
            "id": slot_id,
            **slot.model_dump(mode="json", exclude={"created"}),
            "created": slot.created,
        },
    )
    return slot_id


async def insert_slot(slot: SlotInsertable) -> SlotId:
    slot_id = SlotId(uuid4().hex)
    await database.execute(
        """
        INSERT INTO slots (
            id, league_id, division, offering_team_id, offering_email, game_date,
            start_time, end_time, start_minutes, end_minutes, field_key_raw,
            park_code, field_code, game_type, status, notes, created_by, created
        )
        VALUES (
            :id, :league_id, :division, :offering_team_id, :offering_email, :game_date,
            :start_time, :end_time, :start_minutes, :end_minutes, :field_key_raw,
            :park_code, :field_code, :game_type, :status, :notes, :created_by, :created
        )
        """,
        values={
            "id": slot_id,
            **slot.model_dump(mode="json", exclude={"created"}),
            "created": slot.created,
        },
    )
    return slot_id
