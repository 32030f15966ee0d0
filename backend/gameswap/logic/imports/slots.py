from collections.abc import Mapping, Sequence

from gameswap.logic.imports.fields import try_parse_field_key_flexible
from gameswap.logic.scheduling.rules import (
    SlotValidationError,
    is_valid_game_date,
    validate_time_range,
)
from gameswap.models.db.slot import DEFAULT_GAME_TYPE, SlotImportRow, SlotStatus
from gameswap.models.validation import ValidationOutcome
from gameswap.utils import csv_mini

REQUIRED_COLUMNS: tuple[str, ...] = (
    "division",
    "offeringteamid",
    "gamedate",
    "starttime",
    "endtime",
    "fieldkey",
)
OPTIONAL_COLUMNS: tuple[str, ...] = ("offeringemail", "gametype", "notes", "status")

_COLUMN_LABELS = {
    "division": "Division",
    "offeringteamid": "OfferingTeamId",
    "gamedate": "GameDate",
    "starttime": "StartTime",
    "endtime": "EndTime",
    "fieldkey": "FieldKey",
}


def has_required_columns(index: Mapping[str, int]) -> list[str]:
    return [column for column in REQUIRED_COLUMNS if column not in index]


def parse_slot_status(value: str | None) -> SlotStatus | None:
    normalized = str(value or "").strip().lower()
    if normalized == "":
        return SlotStatus.Open
    for status in SlotStatus:
        if status.value.lower() == normalized:
            return status
    return None


def try_parse_row(
    row: Sequence[str], index: Mapping[str, int]
) -> ValidationOutcome[SlotImportRow]:
    values = {column: csv_mini.get(row, index, column) for column in REQUIRED_COLUMNS}
    missing = [
        _COLUMN_LABELS[column]
        for column, value in values.items()
        if value is None or value.strip() == ""
    ]
    if len(missing) > 0:
        verb = "is" if len(missing) == 1 else "are"
        return ValidationOutcome[SlotImportRow].failure(f"{', '.join(missing)} {verb} required.")

    division, offering_team_id, game_date, start_time, end_time, field_key_raw = (
        str(values[column]).strip() for column in REQUIRED_COLUMNS
    )

    field_key = try_parse_field_key_flexible(field_key_raw, "parkCode", "fieldCode")
    if field_key is None:
        return ValidationOutcome[SlotImportRow].failure(
            "Invalid FieldKey. Use parkCode/fieldCode."
        )

    if not is_valid_game_date(game_date):
        return ValidationOutcome[SlotImportRow].failure("GameDate must be YYYY-MM-DD.")

    try:
        validate_time_range(start_time, end_time)
    except SlotValidationError as exc:
        return ValidationOutcome[SlotImportRow].failure(str(exc))

    status_raw = csv_mini.get_trimmed(row, index, "status")
    status = parse_slot_status(status_raw)
    if status is None:
        return ValidationOutcome[SlotImportRow].failure(
            f"Invalid Status '{status_raw}'. Use Open, Cancelled or Confirmed."
        )

    return ValidationOutcome[SlotImportRow].success(
        SlotImportRow(
            division=division,
            offering_team_id=offering_team_id,
            offering_email=csv_mini.get_trimmed(row, index, "offeringemail"),
            game_date=game_date,
            start_time=start_time,
            end_time=end_time,
            field_key_raw=field_key_raw,
            park_code=field_key.park_code,
            field_code=field_key.field_code,
            game_type=csv_mini.get_trimmed(row, index, "gametype") or DEFAULT_GAME_TYPE,
            status=status,
            notes=csv_mini.get_trimmed(row, index, "notes"),
        )
    )
