from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from gameswap.models.db.slot import DEFAULT_GAME_TYPE, SlotImportRow


class CreateSlotBody(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    division: str | None = None
    offering_team_id: str | None = None
    game_date: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    field_key: str | None = None
    park_name: str | None = None
    field_name: str | None = None
    offering_email: str | None = None
    game_type: str | None = None
    notes: str | None = None


class CreateSlotPayload(BaseModel):
    division: str
    offering_team_id: str
    offering_email: str = ""
    game_date: str
    start_time: str
    end_time: str
    start_minutes: int
    end_minutes: int
    field_key_raw: str
    park_code: str
    field_code: str
    park_name: str | None = None
    field_name: str | None = None
    game_type: str = DEFAULT_GAME_TYPE
    notes: str | None = None
    created_by: str = ""

    def to_import_row(self) -> SlotImportRow:
        return SlotImportRow(
            division=self.division,
            offering_team_id=self.offering_team_id,
            offering_email=self.offering_email,
            game_date=self.game_date,
            start_time=self.start_time,
            end_time=self.end_time,
            field_key_raw=self.field_key_raw,
            park_code=self.park_code,
            field_code=self.field_code,
            game_type=self.game_type,
            notes=self.notes or "",
        )


class ImportRowError(BaseModel):
    row: int
    error: str
    field_key: str | None = None


class ImportSummary(BaseModel):
    upserted: int = 0
    rejected: int = 0
    skipped: int = 0
    errors: list[ImportRowError] = Field(default_factory=list)
