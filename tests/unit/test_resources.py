import pytest

from leaguescope.listing.resources import RESOURCES, ListResource, get_resource
from leaguescope.types import SortOrder


@pytest.mark.unit
class TestResources:
    def test_games_screens_sort_by_date(self) -> None:
        games = get_resource("league.games")
        assert games.endpoint == "games"
        assert games.sort_by == "dateTime"
        assert games.sort_order is SortOrder.ASC
        assert games.page_size == 12
        assert games.required_scope == ("league_id",)

    def test_admin_screens_need_no_scope(self) -> None:
        for key, resource in RESOURCES.items():
            if key.startswith("admin."):
                assert resource.required_scope == ()

    def test_console_screens_need_scope(self) -> None:
        assert get_resource("tenant.seasons").required_scope == ("tenant_id",)
        assert get_resource("team.games").required_scope == ("team_id",)

    def test_tenant_leagues_sorted_by_name(self) -> None:
        leagues = get_resource("tenant.leagues")
        assert (leagues.sort_by, leagues.sort_order) == ("name", SortOrder.ASC)

    def test_defaults_are_sortable(self) -> None:
        for resource in RESOURCES.values():
            assert resource.accepts_sort(resource.sort_by)

    def test_accepts_sort(self) -> None:
        seasons = get_resource("admin.seasons")
        assert seasons.accepts_sort("startDate")
        assert not seasons.accepts_sort("password")

    def test_unrestricted_resource_accepts_anything(self) -> None:
        assert ListResource("x", "things", "thing").accepts_sort("anything")

    def test_unknown_key(self) -> None:
        with pytest.raises(KeyError, match="Unknown list screen"):
            get_resource("admin.nothing")
