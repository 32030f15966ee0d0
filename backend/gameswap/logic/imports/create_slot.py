from gameswap.logic.imports.fields import try_parse_field_key_flexible
from gameswap.logic.scheduling.rules import (
    SlotValidationError,
    is_valid_game_date,
    validate_time_range,
)
from gameswap.models.db.slot import DEFAULT_GAME_TYPE
from gameswap.models.slots import CreateSlotBody, CreateSlotPayload
from gameswap.models.validation import ValidationOutcome


def _clean(value: str | None) -> str:
    return str(value or "").strip()


def try_validate(
    body: CreateSlotBody | None, caller_email: str | None
) -> ValidationOutcome[CreateSlotPayload]:
    if body is None:
        return ValidationOutcome[CreateSlotPayload].failure("Invalid JSON body")

    division = _clean(body.division)
    offering_team_id = _clean(body.offering_team_id)
    game_date = _clean(body.game_date)
    start_time = _clean(body.start_time)
    end_time = _clean(body.end_time)
    field_key_raw = _clean(body.field_key)

    if "" in (division, offering_team_id, game_date, start_time, end_time, field_key_raw):
        return ValidationOutcome[CreateSlotPayload].failure(
            "division, offeringTeamId, gameDate, startTime, endTime, fieldKey are required"
        )

    if not is_valid_game_date(game_date):
        return ValidationOutcome[CreateSlotPayload].failure("gameDate must be YYYY-MM-DD.")

    try:
        start_minutes, end_minutes = validate_time_range(start_time, end_time)
    except SlotValidationError as exc:
        return ValidationOutcome[CreateSlotPayload].failure(str(exc))

    field_key = try_parse_field_key_flexible(field_key_raw, "parkName", "fieldName")
    if field_key is None:
        return ValidationOutcome[CreateSlotPayload].failure(
            "fieldKey must be parkCode/fieldCode."
        )

    created_by = _clean(caller_email)
    return ValidationOutcome[CreateSlotPayload].success(
        CreateSlotPayload(
            division=division,
            offering_team_id=offering_team_id,
            offering_email=_clean(body.offering_email) or created_by,
            game_date=game_date,
            start_time=start_time,
            end_time=end_time,
            start_minutes=start_minutes,
            end_minutes=end_minutes,
            field_key_raw=field_key_raw,
            park_code=field_key.park_code,
            field_code=field_key.field_code,
            park_name=body.park_name,
            field_name=body.field_name,
            game_type=_clean(body.game_type) or DEFAULT_GAME_TYPE,
            notes=body.notes,
            created_by=created_by,
        )
    )
