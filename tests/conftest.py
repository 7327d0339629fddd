"""Shared test fixtures."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from leaguescope.config.settings import Settings
from leaguescope.exceptions import ApiError
from leaguescope.models.api import PaginatedResponse
from leaguescope.models.identity import UserIdentity
from leaguescope.types import Role


class FakeListApi:
    """In-memory ListApi.

    With ``manual=True`` every ``list`` call parks on a future in ``pending``
    so tests decide completion order.
    """

    def __init__(self, manual: bool = False) -> None:
        self.manual = manual
        self.calls: list[tuple[str, list[tuple[str, str]]]] = []
        self.deletes: list[tuple[str, str]] = []
        self.pending: list[asyncio.Future[PaginatedResponse]] = []
        self.list_error: Exception | None = None
        self.delete_error: Exception | None = None
        self.total_pages = 1
        self.items: list[dict[str, Any]] = [{"id": "row-1"}]

    async def list(self, resource: str, params: Any) -> PaginatedResponse:
        self.calls.append((resource, list(params)))
        if self.manual:
            fut: asyncio.Future[PaginatedResponse] = asyncio.get_running_loop().create_future()
            self.pending.append(fut)
            return await fut
        if self.list_error is not None:
            raise self.list_error
        page = int(dict(params).get("page", "1"))
        return PaginatedResponse(
            data=list(self.items),
            total_items=len(self.items),
            total_pages=self.total_pages,
            current_page=page,
            page_size=10,
        )

    async def delete(self, resource: str, item_id: str) -> None:
        self.deletes.append((resource, item_id))
        if self.delete_error is not None:
            raise self.delete_error

    def last_params(self) -> dict[str, list[str]]:
        grouped: dict[str, list[str]] = {}
        for key, value in self.calls[-1][1]:
            grouped.setdefault(key, []).append(value)
        return grouped


def page_of(*ids: str, total_pages: int = 1) -> PaginatedResponse:
    return PaginatedResponse(
        data=[{"id": i} for i in ids],
        total_items=len(ids),
        total_pages=total_pages,
        current_page=1,
        page_size=10,
    )


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        api_base_url="http://backend.test",
        api_max_attempts=1,
        api_retry_delay_ms=1,
        search_debounce_ms=20,
        _env_file=None,
    )


@pytest.fixture()
def fake_api() -> FakeListApi:
    return FakeListApi()


@pytest.fixture()
def system_admin() -> UserIdentity:
    return UserIdentity(id="u-sys", roles={Role.SYSTEM_ADMIN})


@pytest.fixture()
def tenant_admin() -> UserIdentity:
    return UserIdentity(id="u-ta", roles={Role.TENANT_ADMIN}, tenant_id="T1")


@pytest.fixture()
def league_admin() -> UserIdentity:
    return UserIdentity(
        id="u-la", roles={Role.LEAGUE_ADMIN}, tenant_id="T1", managing_league_id="L1"
    )


@pytest.fixture()
def team_admin() -> UserIdentity:
    return UserIdentity(
        id="u-tm",
        roles={Role.TEAM_ADMIN},
        tenant_id="T1",
        managing_team_id="TM1",
        managing_team_league_id="L2",
    )


@pytest.fixture()
def general_user() -> UserIdentity:
    return UserIdentity(id="u-gen", roles={Role.GENERAL_USER}, tenant_id="T1")


@pytest.fixture()
def api_error() -> ApiError:
    return ApiError("Backend exploded", status_code=500)


@pytest.fixture()
def manual_api() -> FakeListApi:
    return FakeListApi(manual=True)


@pytest.fixture()
def make_page():
    return page_of
