import re
from collections.abc import Mapping, Sequence

from gameswap.models.db.field import FieldImportRow, FieldKey
from gameswap.models.validation import ValidationOutcome
from gameswap.utils import csv_mini

REQUIRED_COLUMNS: tuple[str, ...] = ("fieldkey",)
OPTIONAL_COLUMNS: tuple[str, ...] = (
    "parkname",
    "fieldname",
    "displayname",
    "address",
    "notes",
    "status",
    "isactive",
)

_FIELD_KEY_SEPARATORS = ("/", "_")
_WHITESPACE_RUN = re.compile(r"\s+")
_INACTIVE_MARKER = "inactive"
_FALSEY_FLAGS = {"false", "0", "no", "n"}


def has_required_columns(index: Mapping[str, int]) -> list[str]:
    return [column for column in REQUIRED_COLUMNS if column not in index]


def _normalize_code(value: str) -> str:
    return _WHITESPACE_RUN.sub("-", value.strip().lower())


def try_parse_field_key_flexible(
    raw: str | None,
    park_column_label: str = "park",
    field_column_label: str = "field",
) -> FieldKey | None:
    """
    Parse a field key written as ``Park/Field`` or ``Park_Field``.

    The first ``/`` wins; ``_`` is only considered when there is no ``/`` at all.
    Both codes are lower-cased and whitespace runs in the field code become a single
    hyphen, so ``"Central Park/Field 1"`` parses to ``central park`` / ``field-1``.
    The column labels only describe where the parts came from and do not affect parsing.
    """
    value = str(raw or "").strip()
    for separator in _FIELD_KEY_SEPARATORS:
        park_part, found, field_part = value.partition(separator)
        if found == "":
            continue

        park_code = park_part.strip().lower()
        field_code = _normalize_code(field_part)
        if park_code == "" or field_code == "":
            return None
        return FieldKey(park_code=park_code, field_code=field_code)

    return None


def _is_active_text(value: str) -> bool | None:
    normalized = value.strip().lower()
    if normalized == "":
        return None
    if _INACTIVE_MARKER in normalized or normalized in _FALSEY_FLAGS:
        return False
    return True


def parse_is_active(status_text: str | None, fallback_text: str | None = None) -> bool:
    # Both blank defaults to active so an omitted status column never deactivates fields.
    for candidate in (status_text, fallback_text):
        parsed = _is_active_text(str(candidate or ""))
        if parsed is not None:
            return parsed
    return True


def append_optional_field_notes(
    existing_notes: str | None, row: Sequence[str], index: Mapping[str, int]
) -> str:
    notes = str(existing_notes or "").strip()
    extras: list[str] = []
    for column, label in (
        ("lights", "Lights"),
        ("battingcage", "Batting cage"),
        ("portablemound", "Portable mound"),
        ("fieldlockcode", "Lock code"),
    ):
        value = csv_mini.get_trimmed(row, index, column)
        if value != "":
            extras.append(f"{label}: {value}")

    field_notes = csv_mini.get_trimmed(row, index, "fieldnotes")
    if field_notes != "":
        extras.append(field_notes)

    if len(extras) < 1:
        return notes

    extra_text = " | ".join(extras)
    if notes == "":
        return extra_text
    if extra_text.lower() in notes.lower():
        return notes
    return f"{notes} | {extra_text}"


def try_parse_field_row(
    row: Sequence[str], index: Mapping[str, int]
) -> ValidationOutcome[FieldImportRow]:
    field_key_raw = csv_mini.get_trimmed(row, index, "fieldkey")
    park_name = csv_mini.get_trimmed(row, index, "parkname")
    field_name = csv_mini.get_trimmed(row, index, "fieldname")

    if field_key_raw == "":
        return ValidationOutcome[FieldImportRow].failure("FieldKey is required.")

    field_key = try_parse_field_key_flexible(field_key_raw, "parkName", "fieldName")
    if field_key is None:
        return ValidationOutcome[FieldImportRow].failure(
            "Invalid FieldKey. Use parkCode/fieldCode or parkCode_fieldCode."
        )

    display_name = csv_mini.get_trimmed(row, index, "displayname")
    if display_name == "" and park_name != "" and field_name != "":
        display_name = f"{park_name} > {field_name}"

    return ValidationOutcome[FieldImportRow].success(
        FieldImportRow(
            field_key=field_key.normalized,
            park_code=field_key.park_code,
            field_code=field_key.field_code,
            park_name=park_name,
            field_name=field_name,
            display_name=display_name or field_key.normalized,
            address=csv_mini.get_trimmed(row, index, "address"),
            notes=append_optional_field_notes(
                csv_mini.get_trimmed(row, index, "notes"), row, index
            ),
            is_active=parse_is_active(
                csv_mini.get_trimmed(row, index, "status"),
                csv_mini.get_trimmed(row, index, "isactive"),
            ),
        )
    )
