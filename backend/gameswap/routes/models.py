from pydantic import BaseModel

from gameswap.models.slots import ImportSummary
from gameswap.routes.auth import Identity
from gameswap.utils.id_types import LeagueId, SlotId


class DataResponse[DataT](BaseModel):
    data: DataT


class SlotCreated(BaseModel):
    slot_id: SlotId
    league_id: LeagueId
    park_code: str
    field_code: str


class SlotCreatedResponse(DataResponse[SlotCreated]):
    pass


class ImportSummaryResponse(DataResponse[ImportSummary]):
    pass


class MeView(BaseModel):
    identity: Identity
    league_id: LeagueId
    role: str


class MeResponse(DataResponse[MeView]):
    pass
