from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from heliclockter import datetime_utc
from starlette import status

from gameswap.config import config
from gameswap.logic.imports.create_slot import try_validate
from gameswap.logic.imports.pipeline import validate_slot_csv
from gameswap.logic.scheduling.rules import find_conflicts, validate_time_range
from gameswap.models.db.slot import Slot, SlotImportRow, SlotInsertable
from gameswap.models.slots import CreateSlotBody, ImportRowError, ImportSummary
from gameswap.routes.auth import (
    Identity,
    admin_guard,
    current_identity,
    league_scope,
    require_member,
)
from gameswap.routes.models import (
    ImportSummaryResponse,
    SlotCreated,
    SlotCreatedResponse,
)
from gameswap.sql.fields import get_field_activity
from gameswap.sql.memberships import membership_store
from gameswap.sql.slots import (
    build_slot_id,
    get_slots_for_field_and_date,
    insert_slot,
    upsert_slot,
)
from gameswap.utils.csv_mini import read_csv_text
from gameswap.utils.id_types import LeagueId
from gameswap.utils.logging import logger
from gameswap.utils.types import assert_some

router = APIRouter(prefix=config.api_prefix)


def build_slot_insertable(
    league_id: LeagueId, row: SlotImportRow, created_by: str
) -> SlotInsertable:
    start_minutes, end_minutes = validate_time_range(row.start_time, row.end_time)
    return SlotInsertable(
        **row.model_dump(),
        league_id=league_id,
        start_minutes=start_minutes,
        end_minutes=end_minutes,
        created_by=created_by,
        created=datetime_utc.now(),
    )


def check_field_usable(field_activity: dict[str, bool], field_key: str) -> str | None:
    if field_key not in field_activity:
        return "Field not found (import fields first)."
    if not field_activity[field_key]:
        return "Field exists but is inactive."
    return None


@router.post("/slots", response_model=SlotCreatedResponse)
async def create_slot(
    body: CreateSlotBody,
    league_id: LeagueId = Depends(league_scope),
    identity: Identity = Depends(current_identity),
) -> SlotCreatedResponse:
    await require_member(membership_store, identity.user_id, league_id)

    outcome = try_validate(body, identity.email)
    if not outcome.ok:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, outcome.error)
    payload = assert_some(outcome.value)

    field_key = f"{payload.park_code}/{payload.field_code}"
    field_activity = await get_field_activity(league_id)
    field_error = check_field_usable(field_activity, field_key)
    if field_error is not None:
        status_code = (
            status.HTTP_409_CONFLICT
            if field_key in field_activity
            else status.HTTP_400_BAD_REQUEST
        )
        raise HTTPException(status_code, field_error)

    slot = build_slot_insertable(league_id, payload.to_import_row(), payload.created_by)
    existing = await get_slots_for_field_and_date(
        league_id, slot.division, slot.park_code, slot.field_code, slot.game_date
    )
    # Single creates always insert, so an identical existing slot counts as a conflict.
    if len(find_conflicts(slot, existing)) > 0:
        raise HTTPException(
            status.HTTP_409_CONFLICT, "Slot overlaps an existing slot on this field."
        )

    slot_id = await insert_slot(slot)
    return SlotCreatedResponse(
        data=SlotCreated(
            slot_id=slot_id,
            league_id=league_id,
            park_code=slot.park_code,
            field_code=slot.field_code,
        )
    )


@router.post("/import/slots", response_model=ImportSummaryResponse)
async def import_slots(
    file: UploadFile = File(...),
    league_id: LeagueId = Depends(league_scope),
    identity: Identity = Depends(admin_guard),
) -> ImportSummaryResponse:
    await require_member(membership_store, identity.user_id, league_id)

    validated = validate_slot_csv(read_csv_text(await file.read()))
    summary = ImportSummary(
        skipped=validated.summary.skipped,
        rejected=validated.summary.rejected,
        errors=list(validated.summary.errors),
    )
    field_activity = await get_field_activity(league_id)
    accepted: list[Slot] = []

    for validated_row in validated.rows:
        row = validated_row.value
        field_error = check_field_usable(field_activity, row.field_key)
        if field_error is not None:
            summary.rejected += 1
            summary.errors.append(
                ImportRowError(
                    row=validated_row.row, error=field_error, field_key=row.field_key_raw
                )
            )
            continue

        slot = build_slot_insertable(league_id, row, identity.email)
        existing = await get_slots_for_field_and_date(
            league_id, slot.division, slot.park_code, slot.field_code, slot.game_date
        )
        slot_id = build_slot_id(slot)
        if len(find_conflicts(slot, [*existing, *accepted], ignore_slot_id=slot_id)) > 0:
            summary.rejected += 1
            summary.errors.append(
                ImportRowError(
                    row=validated_row.row,
                    error="Slot overlaps an existing slot on this field.",
                    field_key=row.field_key_raw,
                )
            )
            continue

        await upsert_slot(slot)
        accepted.append(Slot(**slot.model_dump(), id=slot_id))
        summary.upserted += 1

    summary.errors.sort(key=lambda error: error.row)
    logger.info(
        "Imported slots: league_id=%s upserted=%s rejected=%s skipped=%s",
        league_id,
        summary.upserted,
        summary.rejected,
        summary.skipped,
    )
    return ImportSummaryResponse(data=summary)
