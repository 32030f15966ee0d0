import base64
import binascii
import json
from typing import Any
from urllib.parse import unquote

from fastapi import Depends, HTTPException, Request
from pydantic import BaseModel, Field
from starlette import status

from gameswap.config import config
from gameswap.models.db.membership import UNKNOWN_USER, Membership
from gameswap.sql.memberships import MembershipStore, membership_store
from gameswap.utils.id_types import LeagueId, UserId
from gameswap.utils.logging import logger

LEAGUE_QUERY_PARAM = "leagueId"
CLIENT_PRINCIPAL_HEADER = "x-ms-client-principal"

_USER_ID_CLAIMS = (
    "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/nameidentifier",
    "nameidentifier",
    "sub",
)
_EMAIL_CLAIMS = (
    "http://schemas.xmlsoap.org/ws/2005/05/identity/claims/emailaddress",
    "emails",
    "email",
    "preferred_username",
    "upn",
)
_ROLE_CLAIMS = {"roles", "role", "http://schemas.microsoft.com/ws/2008/06/identity/claims/role"}


class InvalidScope(HTTPException):
    def __init__(self, detail: str) -> None:
        super().__init__(status.HTTP_400_BAD_REQUEST, detail)


class NotAuthenticated(HTTPException):
    def __init__(self, detail: str = "Not authenticated.") -> None:
        super().__init__(status.HTTP_401_UNAUTHORIZED, detail)


class Forbidden(HTTPException):
    def __init__(self, detail: str = "Forbidden") -> None:
        super().__init__(status.HTTP_403_FORBIDDEN, detail)


class AdminRequired(Forbidden):
    def __init__(self) -> None:
        super().__init__("Admin role required.")


class Identity(BaseModel):
    user_id: UserId
    email: str
    roles: list[str] = Field(default_factory=list)

    @property
    def is_authenticated(self) -> bool:
        return not is_unknown_user(self.user_id)


def is_unknown_user(user_id: str | None) -> bool:
    normalized = str(user_id or "").strip()
    return normalized == "" or normalized.lower() == UNKNOWN_USER.lower()


def get_query_param(request: Request, key: str) -> str:
    """
    Value of the first query parameter named ``key`` (case-insensitive), percent-decoded.

    Parameters without ``=`` are ignored and a missing key yields an empty string.
    """
    query = request.url.query.lstrip("?")
    for part in query.split("&"):
        if part == "":
            continue
        raw_key, separator, raw_value = part.partition("=")
        if separator == "":
            continue
        if unquote(raw_key).lower() != key.lower():
            continue
        return unquote(raw_value)
    return ""


def resolve_league_scope(header_value: str | None, query_value: str | None) -> LeagueId:
    header = str(header_value or "").strip()
    query = str(query_value or "").strip()

    if header != "" and query != "" and header.lower() != query.lower():
        raise InvalidScope(
            f"leagueId mismatch between header {config.league_header_name} "
            f"and query ?{LEAGUE_QUERY_PARAM}=..."
        )

    league_id = header if header != "" else query
    if league_id == "":
        raise InvalidScope(
            f"Missing leagueId. Send {config.league_header_name} header (preferred) "
            f"or ?{LEAGUE_QUERY_PARAM}=..."
        )
    return LeagueId(league_id)


def require_league_id(request: Request) -> LeagueId:
    return resolve_league_scope(
        request.headers.get(config.league_header_name),
        get_query_param(request, LEAGUE_QUERY_PARAM),
    )


async def get_membership(
    store: MembershipStore, user_id: str | None, league_id: str | None
) -> Membership | None:
    normalized_user_id = str(user_id or "").strip()
    normalized_league_id = str(league_id or "").strip()
    if is_unknown_user(normalized_user_id) or normalized_league_id == "":
        return None

    return await store.get(UserId(normalized_user_id), LeagueId(normalized_league_id))


async def is_member(store: MembershipStore, user_id: str | None, league_id: str | None) -> bool:
    return await get_membership(store, user_id, league_id) is not None


async def require_member(
    store: MembershipStore, user_id: str | None, league_id: str | None
) -> None:
    if is_unknown_user(user_id):
        raise NotAuthenticated()

    if not await is_member(store, user_id, league_id):
        logger.info("Denied league access: user_id=%s league_id=%s", user_id, league_id)
        raise Forbidden()


async def get_role(store: MembershipStore, user_id: str | None, league_id: str | None) -> str:
    membership = await get_membership(store, user_id, league_id)
    return membership.role.strip() if membership is not None else ""


async def require_admin(
    store: MembershipStore,
    user_id: str | None,
    *,
    require_admin_role: bool,
    page_size: int = config.membership_page_size,
) -> None:
    """
    Admin gate for league management.

    Without ``require_admin_role`` any membership row (any league, any role) is enough.
    With it, at least one membership must carry the ``Admin`` role. A user with
    memberships but no Admin role gets ``AdminRequired`` rather than plain ``Forbidden``.
    """
    normalized_user_id = str(user_id or "").strip()
    if is_unknown_user(normalized_user_id):
        raise NotAuthenticated()

    has_any = False
    async for membership in store.iter_for_user(UserId(normalized_user_id), page_size):
        has_any = True
        if not require_admin_role or membership.is_admin:
            return

    if not has_any:
        logger.info("Denied admin access, no memberships: user_id=%s", normalized_user_id)
        raise Forbidden()

    logger.info("Denied admin access, no Admin role: user_id=%s", normalized_user_id)
    raise AdminRequired()


def _find_claim(claims: list[dict[str, Any]], claim_types: tuple[str, ...]) -> str | None:
    for claim in claims:
        if claim.get("typ") in claim_types and isinstance(claim.get("val"), str):
            return str(claim["val"])
    return None


def _parse_roles(raw: str | None) -> list[str]:
    roles: list[str] = []
    for role in str(raw or "").split(","):
        normalized = role.strip()
        if normalized != "" and normalized.lower() not in {r.lower() for r in roles}:
            roles.append(normalized)
    return roles


def _identity_from_principal(encoded: str) -> Identity | None:
    try:
        principal = json.loads(base64.b64decode(encoded, validate=False).decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError):
        logger.debug("Ignoring undecodable %s header", CLIENT_PRINCIPAL_HEADER)
        return None

    if not isinstance(principal, dict):
        return None

    raw_claims = principal.get("claims")
    claims = [c for c in raw_claims if isinstance(c, dict)] if isinstance(raw_claims, list) else []

    user_id = principal.get("userId") if isinstance(principal.get("userId"), str) else None
    email = principal.get("userDetails") if isinstance(principal.get("userDetails"), str) else None
    user_id = user_id or _find_claim(claims, _USER_ID_CLAIMS)
    email = email or _find_claim(claims, _EMAIL_CLAIMS)

    roles = _parse_roles(
        ",".join(
            str(claim.get("val") or "")
            for claim in claims
            if str(claim.get("typ") or "").lower() in _ROLE_CLAIMS
        )
    )
    return Identity(
        user_id=UserId(user_id or UNKNOWN_USER),
        email=email or UNKNOWN_USER,
        roles=roles,
    )


def get_identity(request: Request) -> Identity:
    encoded = request.headers.get(CLIENT_PRINCIPAL_HEADER, "").strip()
    if encoded != "":
        identity = _identity_from_principal(encoded)
        if identity is not None:
            return identity

    return Identity(
        user_id=UserId(request.headers.get("x-user-id") or UNKNOWN_USER),
        email=request.headers.get("x-user-email") or UNKNOWN_USER,
        roles=_parse_roles(request.headers.get("x-user-roles")),
    )


async def league_scope(request: Request) -> LeagueId:
    return require_league_id(request)


async def current_identity(request: Request) -> Identity:
    return get_identity(request)


async def admin_guard(identity: Identity = Depends(current_identity)) -> Identity:
    await require_admin(
        membership_store, identity.user_id, require_admin_role=config.require_admin_role
    )
    return identity
