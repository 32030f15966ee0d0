from gameswap.database import database
from gameswap.models.db.field import FieldImportRow
from gameswap.schema import fields
from gameswap.utils.id_types import LeagueId


async def get_field_activity(league_id: LeagueId) -> dict[str, bool]:
    """Normalized field key -> is_active for every field of a league."""
    query = fields.select().where(fields.c.league_id == league_id)
    result = await database.fetch_all(query=query)
    return {
        f"{row._mapping['park_code']}/{row._mapping['field_code']}": bool(row._mapping["is_active"])
        for row in result
    }


async def upsert_field(league_id: LeagueId, field: FieldImportRow) -> None:
    await database.execute(
        """
        INSERT INTO fields (
            league_id, park_code, field_code, park_name, field_name,
            display_name, address, notes, is_active, updated
        )
        VALUES (
            :league_id, :park_code, :field_code, :park_name, :field_name,
            :display_name, :address, :notes, :is_active, now()
        )
        ON CONFLICT (league_id, park_code, field_code) DO UPDATE
        SET park_name = EXCLUDED.park_name,
            field_name = EXCLUDED.field_name,
            display_name = EXCLUDED.display_name,
            address = EXCLUDED.address,
            notes = EXCLUDED.notes,
            is_active = EXCLUDED.is_active,
            updated = now()
        """,
        values={
            "league_id": league_id,
            **field.model_dump(exclude={"field_key"}),
        },
    )
