import pytest
from fastapi import HTTPException

from gameswap.logic.imports.pipeline import validate_field_csv, validate_slot_csv

SLOT_CSV = """Division,OfferingTeamId,GameDate,StartTime,EndTime,FieldKey,Status
U10,TEAM1,2024-05-01,09:00,10:00,Park/Field 1,
U10,,2024-05-01,09:00,10:00,Park/Field 1,
,,,,,,
U10,TEAM2,05/02/2024,09:00,10:00,Park/Field 1,
U12,TEAM3,2024-05-03,11:00,12:30,park_field-2,Confirmed
"""


def test_validate_slot_csv_reports_rows_in_order() -> None:
    result = validate_slot_csv(SLOT_CSV)

    assert [validated.row for validated in result.rows] == [2, 6]
    assert [validated.value.field_key for validated in result.rows] == [
        "park/field-1",
        "park/field-2",
    ]
    assert result.summary.skipped == 1
    assert result.summary.rejected == 2
    assert [error.row for error in result.summary.errors] == [3, 5]
    assert "required" in result.summary.errors[0].error
    assert "YYYY-MM-DD" in result.summary.errors[1].error
    assert result.summary.errors[1].field_key == "Park/Field 1"


def test_validate_slot_csv_rejects_missing_columns() -> None:
    with pytest.raises(HTTPException) as exc_info:
        validate_slot_csv("division,fieldkey\nU10,park/field\n")

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail["missing"] == [
        "offeringteamid",
        "gamedate",
        "starttime",
        "endtime",
    ]


def test_validate_slot_csv_rejects_empty_input() -> None:
    with pytest.raises(HTTPException, match="Empty CSV body"):
        validate_slot_csv("   ")

    with pytest.raises(HTTPException, match="No CSV rows found"):
        validate_slot_csv("division,offeringteamid,gamedate,starttime,endtime,fieldkey\n")


def test_validate_slot_csv_rejects_oversized_cell() -> None:
    csv_text = (
        "division,offeringteamid,gamedate,starttime,endtime,fieldkey,notes\n"
        f"U10,TEAM1,2024-05-01,09:00,10:00,Park/Field 1,{'x' * 200_000}\n"
    )

    with pytest.raises(HTTPException, match="Invalid CSV") as exc_info:
        validate_slot_csv(csv_text)

    assert exc_info.value.status_code == 400


def test_validate_field_csv() -> None:
    csv_text = (
        "FieldKey,ParkName,FieldName,Status,Lights\n"
        "Central/Field 1,Central,Field 1,Active,Yes\n"
        "Central_Field 2,Central,Field 2,Inactive,\n"
        "nofieldkey,Central,Field 3,,\n"
    )

    result = validate_field_csv(csv_text)

    fields = [validated.value for validated in result.rows]
    assert [field.field_key for field in fields] == ["central/field-1", "central/field-2"]
    assert [field.is_active for field in fields] == [True, False]
    assert fields[0].notes == "Lights: Yes"
    assert result.summary.rejected == 1
    assert result.summary.errors[0].row == 4
