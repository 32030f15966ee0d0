from collections.abc import AsyncIterator
from typing import Protocol

from gameswap.config import config
from gameswap.database import database
from gameswap.models.db.membership import Membership
from gameswap.schema import memberships
from gameswap.utils.id_types import LeagueId, UserId


class MembershipStore(Protocol):
    async def get(self, user_id: UserId, league_id: LeagueId) -> Membership | None:
        """Point lookup; None means no such membership."""

    def iter_for_user(self, user_id: UserId, page_size: int) -> AsyncIterator[Membership]:
        """Every membership of a user, fetched in pages of at most ``page_size`` rows."""


async def get_membership(user_id: UserId, league_id: LeagueId) -> Membership | None:
    query = memberships.select().where(
        (memberships.c.user_id == user_id) & (memberships.c.league_id == league_id)
    )
    result = await database.fetch_one(query=query)
    return Membership.model_validate(dict(result._mapping)) if result is not None else None


async def get_memberships_page(
    user_id: UserId, after_league_id: LeagueId | None, page_size: int
) -> list[Membership]:
    query = """
        SELECT user_id, league_id, role, created
        FROM memberships
        WHERE user_id = :user_id
          AND (CAST(:after_league_id AS TEXT) IS NULL OR league_id > :after_league_id)
        ORDER BY league_id ASC
        LIMIT :page_size
        """
    result = await database.fetch_all(
        query=query,
        values={
            "user_id": user_id,
            "after_league_id": after_league_id,
            "page_size": page_size,
        },
    )
    return [Membership.model_validate(dict(row._mapping)) for row in result]


class SqlMembershipStore:
    async def get(self, user_id: UserId, league_id: LeagueId) -> Membership | None:
        return await get_membership(user_id, league_id)

    async def iter_for_user(
        self, user_id: UserId, page_size: int = config.membership_page_size
    ) -> AsyncIterator[Membership]:
        after_league_id: LeagueId | None = None
        while True:
            page = await get_memberships_page(user_id, after_league_id, page_size)
            for membership in page:
                yield membership

            if len(page) < page_size:
                return
            after_league_id = page[-1].league_id


membership_store = SqlMembershipStore()
