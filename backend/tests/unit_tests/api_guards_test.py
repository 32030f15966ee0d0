import base64
import json

import pytest
from starlette.exceptions import HTTPException

from gameswap.routes.auth import (
    AdminRequired,
    Forbidden,
    InvalidScope,
    NotAuthenticated,
    get_identity,
    get_query_param,
    get_role,
    is_member,
    require_admin,
    require_league_id,
    require_member,
    resolve_league_scope,
)
from tests.fakes import FakeMembershipStore, build_membership, build_request


def test_require_league_id_accepts_matching_header_and_query() -> None:
    request = build_request({"x-league-id": "lg1"}, "leagueId=LG1")

    assert require_league_id(request) == "lg1"


def test_require_league_id_falls_back_to_query() -> None:
    assert require_league_id(build_request(query="leagueId=lg2")) == "lg2"
    assert require_league_id(build_request({"X-League-Id": " lg3 "})) == "lg3"


def test_require_league_id_rejects_mismatch() -> None:
    request = build_request({"x-league-id": "lg1"}, "leagueId=lg2")

    with pytest.raises(InvalidScope, match="mismatch") as exc_info:
        require_league_id(request)

    assert exc_info.value.status_code == 400


def test_require_league_id_rejects_missing_scope() -> None:
    with pytest.raises(InvalidScope, match="Missing leagueId"):
        require_league_id(build_request({"x-league-id": "  "}, "leagueId="))


def test_resolve_league_scope_prefers_header() -> None:
    assert resolve_league_scope("Lg1", "lg1") == "Lg1"
    assert resolve_league_scope(None, "lg1") == "lg1"


def test_get_query_param() -> None:
    request = build_request(query="foo=1&LeagueID=first%20league&leagueId=second&flag&empty=")

    assert get_query_param(request, "leagueid") == "first league"
    assert get_query_param(request, "empty") == ""
    assert get_query_param(request, "flag") == ""
    assert get_query_param(request, "missing") == ""


def test_get_query_param_decodes_keys() -> None:
    request = build_request(query="league%49d=lg9")

    assert get_query_param(request, "leagueId") == "lg9"


@pytest.mark.asyncio
async def test_is_member_rejects_unknown_user_regardless_of_store() -> None:
    store = FakeMembershipStore([build_membership("UNKNOWN", "lg1", "Admin")])

    assert await is_member(store, "UNKNOWN", "lg1") is False
    assert await is_member(store, "unknown", "lg1") is False
    assert await is_member(store, "  ", "lg1") is False
    assert store.get_calls == 0


@pytest.mark.asyncio
async def test_is_member_trims_and_looks_up_exact_key() -> None:
    store = FakeMembershipStore([build_membership("user-1", "lg1")])

    assert await is_member(store, " user-1 ", " lg1 ") is True
    assert await is_member(store, "user-1", "lg2") is False
    assert await is_member(store, "user-1", "") is False


@pytest.mark.asyncio
async def test_is_member_propagates_store_failures() -> None:
    store = FakeMembershipStore()
    store.error = ConnectionError("store unavailable")

    with pytest.raises(ConnectionError):
        await is_member(store, "user-1", "lg1")


@pytest.mark.asyncio
async def test_require_member() -> None:
    store = FakeMembershipStore([build_membership("user-1", "lg1")])

    await require_member(store, "user-1", "lg1")

    with pytest.raises(Forbidden) as exc_info:
        await require_member(store, "user-1", "lg2")
    assert exc_info.value.status_code == 403

    with pytest.raises(NotAuthenticated):
        await require_member(store, "UNKNOWN", "lg1")


@pytest.mark.asyncio
async def test_get_role() -> None:
    store = FakeMembershipStore([build_membership("user-1", "lg1", " Admin ")])

    assert await get_role(store, "user-1", "lg1") == "Admin"
    assert await get_role(store, "user-1", "lg2") == ""
    assert await get_role(store, "UNKNOWN", "lg1") == ""


@pytest.mark.asyncio
async def test_require_admin_rejects_unknown_caller() -> None:
    store = FakeMembershipStore([build_membership("UNKNOWN", "lg1", "Admin")])

    with pytest.raises(NotAuthenticated):
        await require_admin(store, "UNKNOWN", require_admin_role=False)
    with pytest.raises(NotAuthenticated):
        await require_admin(store, "", require_admin_role=True)
    assert store.scanned_rows == 0


@pytest.mark.asyncio
async def test_require_admin_any_membership_when_toggle_off() -> None:
    store = FakeMembershipStore(
        [build_membership("user-1", "lg1", "Coach"), build_membership("user-1", "lg2", "Viewer")]
    )

    await require_admin(store, "user-1", require_admin_role=False)

    assert store.scanned_rows == 1


@pytest.mark.asyncio
async def test_require_admin_without_memberships_is_forbidden() -> None:
    store = FakeMembershipStore([build_membership("user-2", "lg1", "Admin")])

    with pytest.raises(Forbidden) as exc_info:
        await require_admin(store, "user-1", require_admin_role=False)

    assert not isinstance(exc_info.value, AdminRequired)
    assert exc_info.value.detail == "Forbidden"


@pytest.mark.asyncio
async def test_require_admin_role_when_toggle_on() -> None:
    store = FakeMembershipStore(
        [
            build_membership("user-1", "lg1", "Coach"),
            build_membership("user-1", "lg2", "admin"),
            build_membership("user-1", "lg3", "Admin"),
        ]
    )

    await require_admin(store, "user-1", require_admin_role=True)

    assert store.scanned_rows == 2


@pytest.mark.asyncio
async def test_require_admin_member_without_admin_role_gets_distinct_error() -> None:
    store = FakeMembershipStore([build_membership("user-1", "lg1", "Coach")])

    with pytest.raises(AdminRequired) as exc_info:
        await require_admin(store, "user-1", require_admin_role=True)

    assert isinstance(exc_info.value, HTTPException)
    assert exc_info.value.status_code == 403
    assert "Admin role required" in exc_info.value.detail


def _encode_principal(principal: dict) -> str:
    return base64.b64encode(json.dumps(principal).encode()).decode()


def test_get_identity_from_client_principal() -> None:
    principal = {
        "userId": "aad-123",
        "claims": [
            {"typ": "emails", "val": "coach@example.com"},
            {"typ": "roles", "val": "authenticated"},
            {"typ": "roles", "val": "Authenticated"},
        ],
    }
    request = build_request({"x-ms-client-principal": _encode_principal(principal)})

    identity = get_identity(request)

    assert identity.user_id == "aad-123"
    assert identity.email == "coach@example.com"
    assert identity.roles == ["authenticated"]
    assert identity.is_authenticated


def test_get_identity_falls_back_to_dev_headers() -> None:
    request = build_request(
        {
            "x-ms-client-principal": "not base64 json",
            "x-user-id": "dev-user",
            "x-user-email": "dev@example.com",
            "x-user-roles": "Admin, Coach,admin",
        }
    )

    identity = get_identity(request)

    assert identity.user_id == "dev-user"
    assert identity.email == "dev@example.com"
    assert identity.roles == ["Admin", "Coach"]


def test_get_identity_without_headers_is_unknown() -> None:
    identity = get_identity(build_request())

    assert identity.user_id == "UNKNOWN"
    assert identity.email == "UNKNOWN"
    assert not identity.is_authenticated
