import pytest

from leaguescope.constants import DEFAULT_PAGE_SIZE, DEFAULT_SEARCH_DEBOUNCE_MS, MAX_PAGE_SIZE
from leaguescope.exceptions import (
    ApiError,
    ConfigError,
    FetchError,
    LeagueScopeError,
    MissingScopeError,
    MutationError,
    StaleResultDiscarded,
)
from leaguescope.types import ConsoleSection, ErrorKind, ListStatus, Role, SortOrder


@pytest.mark.unit
class TestEnums:
    def test_role_values_match_backend_names(self) -> None:
        assert Role.SYSTEM_ADMIN.value == "SYSTEM_ADMIN"
        assert Role.GENERAL_USER.value == "GENERAL_USER"
        assert len(list(Role)) == 5

    def test_sort_order_values(self) -> None:
        assert SortOrder.ASC.value == "asc"
        assert SortOrder.DESC.value == "desc"

    def test_list_status_values(self) -> None:
        assert [s.value for s in ListStatus] == ["idle", "loading", "ready", "error"]

    def test_error_kind_values(self) -> None:
        assert ErrorKind.MISSING_SCOPE.value == "missing_scope"

    def test_console_sections(self) -> None:
        assert ConsoleSection.ADMIN.value == "admin"
        assert ConsoleSection.PUBLIC.value == "public"


@pytest.mark.unit
class TestExceptions:
    def test_hierarchy(self) -> None:
        for cls in (ConfigError, ApiError, MissingScopeError, FetchError, MutationError):
            assert issubclass(cls, LeagueScopeError)

    def test_api_error_carries_status(self) -> None:
        err = ApiError("nope", status_code=403)
        assert err.status_code == 403
        assert str(err) == "nope"

    def test_missing_scope_message_names_field(self) -> None:
        err = MissingScopeError("league_id")
        assert err.field == "league_id"
        assert str(err).startswith("League ID not available")

    def test_stale_marker_keeps_sequence_numbers(self) -> None:
        marker = StaleResultDiscarded(2, 5)
        assert (marker.seq, marker.latest) == (2, 5)

    def test_catchable_as_base(self) -> None:
        with pytest.raises(LeagueScopeError):
            raise FetchError("failed")


@pytest.mark.unit
class TestConstants:
    def test_defaults(self) -> None:
        assert DEFAULT_PAGE_SIZE == 10
        assert MAX_PAGE_SIZE == 100
        assert DEFAULT_SEARCH_DEBOUNCE_MS == 500
