from heliclockter import datetime_utc

from gameswap.models.db.shared import BaseModelORM
from gameswap.utils.id_types import LeagueId, UserId

ADMIN_ROLE = "Admin"
UNKNOWN_USER = "UNKNOWN"


class Membership(BaseModelORM):
    user_id: UserId
    league_id: LeagueId
    role: str = ""
    created: datetime_utc | None = None

    @property
    def is_admin(self) -> bool:
        return self.role.strip().lower() == ADMIN_ROLE.lower()
