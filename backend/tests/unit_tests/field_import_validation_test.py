import pytest

from gameswap.logic.imports.fields import (
    append_optional_field_notes,
    has_required_columns,
    parse_is_active,
    try_parse_field_key_flexible,
    try_parse_field_row,
)
from gameswap.utils import csv_mini


@pytest.mark.parametrize("raw", ["Park/Field", "Park_Field", "park/field", " Park / Field "])
def test_parse_field_key_formats(raw: str) -> None:
    field_key = try_parse_field_key_flexible(raw, "Park", "Field")

    assert field_key is not None
    assert field_key.park_code == "park"
    assert field_key.field_code == "field"
    assert field_key.normalized == "park/field"


def test_parse_field_key_is_idempotent_on_normalized_form() -> None:
    first = try_parse_field_key_flexible("Park_Field 1")
    assert first is not None

    second = try_parse_field_key_flexible(first.normalized)

    assert second == first
    assert second.normalized == "park/field-1"


def test_parse_field_key_hyphenates_multi_word_field() -> None:
    field_key = try_parse_field_key_flexible("Park/Field   1")

    assert field_key is not None
    assert field_key.field_code == "field-1"


def test_parse_field_key_prefers_slash_over_underscore() -> None:
    field_key = try_parse_field_key_flexible("North_Park/Field_2")

    assert field_key is not None
    assert field_key.park_code == "north_park"
    assert field_key.field_code == "field_2"


@pytest.mark.parametrize("raw", ["", "ParkField", "/Field", "Park/", "_Field", "  /  "])
def test_parse_field_key_rejects_malformed(raw: str) -> None:
    assert try_parse_field_key_flexible(raw) is None


def test_parse_is_active() -> None:
    assert parse_is_active("Active", "") is True
    assert parse_is_active("Inactive", "") is False
    assert parse_is_active("INACTIVE - flooded", "") is False
    assert parse_is_active("", "") is True
    assert parse_is_active(None, None) is True


def test_parse_is_active_consults_fallback_when_status_blank() -> None:
    assert parse_is_active("", "Inactive") is False
    assert parse_is_active("", "false") is False
    assert parse_is_active("", "true") is True
    assert parse_is_active("Active", "false") is True


def test_append_optional_field_notes() -> None:
    index = csv_mini.header_index(["fieldkey", "lights", "fieldlockcode", "fieldnotes"])
    row = ["park/field", "Yes", "1234", "Gate on north side"]

    notes = append_optional_field_notes("Turf", row, index)

    assert notes == "Turf | Lights: Yes | Lock code: 1234 | Gate on north side"
    assert append_optional_field_notes(notes, row, index) == notes
    assert append_optional_field_notes("", ["park/field", "", "", ""], index) == ""


def test_field_row_parses_and_defaults_active() -> None:
    index = csv_mini.header_index(["FieldKey", "ParkName", "FieldName", "Status"])

    outcome = try_parse_field_row(["Central_Field 2", "Central", "Field 2", ""], index)

    assert outcome.ok, outcome.error
    assert outcome.value is not None
    assert outcome.value.field_key == "central/field-2"
    assert outcome.value.display_name == "Central > Field 2"
    assert outcome.value.is_active is True


def test_field_row_rejects_bad_field_key() -> None:
    index = csv_mini.header_index(["fieldkey"])

    outcome = try_parse_field_row(["centralfield"], index)

    assert not outcome.ok
    assert "Invalid FieldKey" in outcome.error


def test_has_required_columns() -> None:
    assert has_required_columns(csv_mini.header_index(["parkname"])) == ["fieldkey"]
    assert has_required_columns(csv_mini.header_index(["Field Key"])) == []
