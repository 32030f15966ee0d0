from fastapi import APIRouter, Depends

from gameswap.config import config
from gameswap.routes.auth import (
    Identity,
    current_identity,
    get_role,
    league_scope,
    require_member,
)
from gameswap.routes.models import MeResponse, MeView
from gameswap.sql.memberships import membership_store
from gameswap.utils.id_types import LeagueId

router = APIRouter(prefix=config.api_prefix)


@router.get("/me", response_model=MeResponse)
async def get_me(
    league_id: LeagueId = Depends(league_scope),
    identity: Identity = Depends(current_identity),
) -> MeResponse:
    await require_member(membership_store, identity.user_id, league_id)
    return MeResponse(
        data=MeView(
            identity=identity,
            league_id=league_id,
            role=await get_role(membership_store, identity.user_id, league_id),
        )
    )
