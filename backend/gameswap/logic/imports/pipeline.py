import csv
from collections.abc import Callable, Mapping, Sequence

from fastapi import HTTPException
from pydantic import BaseModel, Field
from starlette import status

from gameswap.logic.imports import fields as field_validation
from gameswap.logic.imports import slots as slot_validation
from gameswap.models.db.field import FieldImportRow
from gameswap.models.db.slot import SlotImportRow
from gameswap.models.slots import ImportRowError, ImportSummary
from gameswap.models.validation import ValidationOutcome
from gameswap.utils import csv_mini
from gameswap.utils.logging import logger


class ValidatedRow[RowT](BaseModel):
    row: int
    value: RowT


class ValidatedImport[RowT](BaseModel):
    rows: list[ValidatedRow[RowT]] = Field(default_factory=list)
    summary: ImportSummary = Field(default_factory=ImportSummary)


def _read_rows(
    csv_text: str,
    find_missing_columns: Callable[[Mapping[str, int]], list[str]],
    required: Sequence[str],
    optional: Sequence[str],
) -> tuple[list[list[str]], dict[str, int]]:
    if csv_text.strip() == "":
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Empty CSV body.")

    try:
        rows = csv_mini.parse(csv_text)
    except csv.Error as exc:
        logger.info("Rejected unreadable CSV: %s", exc)
        raise HTTPException(status.HTTP_400_BAD_REQUEST, f"Invalid CSV: {exc}") from exc

    if len(rows) < 2:
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "No CSV rows found.")

    index = csv_mini.header_index(rows[0])
    missing = find_missing_columns(index)
    if len(missing) > 0:
        raise HTTPException(
            status.HTTP_400_BAD_REQUEST,
            {
                "error": "Missing required columns.",
                "required": list(required),
                "missing": missing,
                "optional": list(optional),
            },
        )
    return rows, index


def _validate_rows[RowT](
    rows: list[list[str]],
    index: dict[str, int],
    parse_row: Callable[[Sequence[str], Mapping[str, int]], ValidationOutcome[RowT]],
) -> ValidatedImport[RowT]:
    result: ValidatedImport[RowT] = ValidatedImport()
    # Row numbers are 1-based and count the header, matching what spreadsheets show.
    for position, row in enumerate(rows[1:], start=2):
        if csv_mini.is_blank_row(row):
            result.summary.skipped += 1
            continue

        outcome = parse_row(row, index)
        if not outcome.ok or outcome.value is None:
            result.summary.rejected += 1
            result.summary.errors.append(
                ImportRowError(
                    row=position,
                    error=outcome.error,
                    field_key=csv_mini.get(row, index, "fieldkey"),
                )
            )
            continue

        result.rows.append(ValidatedRow(row=position, value=outcome.value))
    return result


def validate_slot_csv(csv_text: str) -> ValidatedImport[SlotImportRow]:
    rows, index = _read_rows(
        csv_text,
        slot_validation.has_required_columns,
        slot_validation.REQUIRED_COLUMNS,
        slot_validation.OPTIONAL_COLUMNS,
    )
    result = _validate_rows(rows, index, slot_validation.try_parse_row)
    logger.info(
        "Validated slot CSV: valid=%s rejected=%s skipped=%s",
        len(result.rows),
        result.summary.rejected,
        result.summary.skipped,
    )
    return result


def validate_field_csv(csv_text: str) -> ValidatedImport[FieldImportRow]:
    rows, index = _read_rows(
        csv_text,
        field_validation.has_required_columns,
        field_validation.REQUIRED_COLUMNS,
        field_validation.OPTIONAL_COLUMNS,
    )
    result = _validate_rows(rows, index, field_validation.try_parse_field_row)
    logger.info(
        "Validated field CSV: valid=%s rejected=%s skipped=%s",
        len(result.rows),
        result.summary.rejected,
        result.summary.skipped,
    )
    return result
