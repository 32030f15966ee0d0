from enum import auto

from heliclockter import datetime_utc

from gameswap.models.db.shared import BaseModelORM
from gameswap.utils.id_types import LeagueId, SlotId
from gameswap.utils.types import EnumAutoStr

DEFAULT_GAME_TYPE = "Swap"


class SlotStatus(EnumAutoStr):
    Open = auto()
    Cancelled = auto()
    Confirmed = auto()


class SlotImportRow(BaseModelORM):
    division: str
    offering_team_id: str
    offering_email: str = ""
    game_date: str
    start_time: str
    end_time: str
    field_key_raw: str
    park_code: str
    field_code: str
    game_type: str = DEFAULT_GAME_TYPE
    status: SlotStatus = SlotStatus.Open
    notes: str = ""

    @property
    def field_key(self) -> str:
        return f"{self.park_code}/{self.field_code}"


class SlotInsertable(SlotImportRow):
    league_id: LeagueId
    start_minutes: int
    end_minutes: int
    created_by: str = ""
    created: datetime_utc


class Slot(SlotInsertable):
    id: SlotId
