import csv
import io
from collections.abc import Mapping, Sequence

_HEADER_SEPARATORS = (" ", "_", "-")


def normalize_header_key(key: str | None) -> str:
    normalized = str(key or "").strip().lower()
    for separator in _HEADER_SEPARATORS:
        normalized = normalized.replace(separator, "")
    return normalized


def read_csv_text(raw: bytes | str) -> str:
    text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
    text = text.removeprefix("\ufeff")
    return text.replace("\r\n", "\n").replace("\r", "\n")


def parse(text: str) -> list[list[str]]:
    """
    Split CSV text into rows of cells.

    Handles quoted cells with doubled quote escapes and newlines inside quotes.
    Returns no rows for blank input.
    """
    if text.strip() == "":
        return []
    return [list(row) for row in csv.reader(io.StringIO(read_csv_text(text)), strict=False)]


def header_index(header: Sequence[str] | None) -> dict[str, int]:
    index: dict[str, int] = {}
    for position, column in enumerate(header or []):
        key = normalize_header_key(column)
        if key == "" or key in index:
            continue
        index[key] = position
    return index


def get(row: Sequence[str] | None, index: Mapping[str, int], key: str) -> str | None:
    """Cell for the named column, or None when the column is absent from the header or row."""
    if row is None:
        return None

    position = index.get(normalize_header_key(key))
    if position is None or position < 0 or position >= len(row):
        return None
    return row[position] if row[position] is not None else ""


def get_trimmed(row: Sequence[str] | None, index: Mapping[str, int], key: str) -> str:
    return (get(row, index, key) or "").strip()


def is_blank_row(row: Sequence[str] | None) -> bool:
    return row is None or all(str(cell or "").strip() == "" for cell in row)
