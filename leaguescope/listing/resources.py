"""List-screen descriptors: endpoint, required scope and sort defaults."""

from __future__ import annotations

from dataclasses import dataclass, field

from leaguescope.constants import DEFAULT_SORT_BY
from leaguescope.types import SortOrder

_TENANT_COLUMNS = frozenset(
    {"name", "tenantCode", "tenantType", "sportType", "country", "ownerUsername", "createdAt", "updatedAt"}
)
_LEAGUE_COLUMNS = frozenset(
    {"name", "sportType", "country", "ownerUsername", "createdAt", "updatedAt", "division", "establishedYear"}
)
_SEASON_COLUMNS = frozenset(
    {"name", "startDate", "endDate", "status", "createdAt", "updatedAt", "leagueName", "tenantName"}
)
_TEAM_COLUMNS = frozenset(
    {"name", "shortCode", "leagueName", "tenantName", "country", "city", "establishedYear", "createdAt", "updatedAt"}
)
_GAME_COLUMNS = frozenset({"dateTime", "createdAt"})
_USER_COLUMNS = frozenset(
    {"firstName", "lastName", "email", "username", "createdAt", "updatedAt", "lastLoginAt"}
)
_POST_COLUMNS = frozenset(
    {"title", "type", "status", "tenantName", "leagueName", "teamName", "createdAt", "publishedAt"}
)


@dataclass(frozen=True, slots=True)
class ListResource:
    """One paginated list screen.

    ``endpoint`` is the REST collection path; ``required_scope`` names the
    EffectiveScope fields that must be set before the screen may fetch.
    """

    key: str
    endpoint: str
    label: str
    required_scope: tuple[str, ...] = ()
    sort_by: str = DEFAULT_SORT_BY
    sort_order: SortOrder = SortOrder.DESC
    page_size: int | None = None  # None -> settings.default_page_size
    sortable: frozenset[str] = field(default_factory=frozenset)

    def accepts_sort(self, column: str) -> bool:
        return not self.sortable or column in self.sortable


def _games(key: str, required_scope: tuple[str, ...] = ()) -> ListResource:
    return ListResource(
        key,
        "games",
        "game",
        required_scope=required_scope,
        sort_by="dateTime",
        sort_order=SortOrder.ASC,
        page_size=12,
        sortable=_GAME_COLUMNS,
    )


RESOURCES: dict[str, ListResource] = {
    r.key: r
    for r in (
        # System admin console: global unless drilled in
        ListResource("admin.tenants", "tenants", "tenant", sortable=_TENANT_COLUMNS),
        ListResource("admin.leagues", "leagues", "league", sortable=_LEAGUE_COLUMNS),
        ListResource("admin.seasons", "seasons", "season", sortable=_SEASON_COLUMNS),
        ListResource("admin.teams", "teams", "team", sortable=_TEAM_COLUMNS),
        _games("admin.games"),
        ListResource("admin.users", "users", "user", sortable=_USER_COLUMNS),
        # Tenant console
        ListResource(
            "tenant.leagues",
            "leagues",
            "league",
            required_scope=("tenant_id",),
            sort_by="name",
            sort_order=SortOrder.ASC,
            sortable=_LEAGUE_COLUMNS,
        ),
        ListResource(
            "tenant.seasons", "seasons", "season", ("tenant_id",), sortable=_SEASON_COLUMNS
        ),
        ListResource("tenant.teams", "teams", "team", ("tenant_id",), sortable=_TEAM_COLUMNS),
        _games("tenant.games", ("tenant_id",)),
        ListResource("tenant.posts", "posts", "post", ("tenant_id",), sortable=_POST_COLUMNS),
        # League console
        ListResource(
            "league.seasons", "seasons", "season", ("league_id",), sortable=_SEASON_COLUMNS
        ),
        ListResource("league.teams", "teams", "team", ("league_id",), sortable=_TEAM_COLUMNS),
        _games("league.games", ("league_id",)),
        ListResource("league.users", "users", "user", ("league_id",), sortable=_USER_COLUMNS),
        ListResource("league.posts", "posts", "post", ("league_id",), sortable=_POST_COLUMNS),
        # Team console
        _games("team.games", ("team_id",)),
        ListResource("team.posts", "posts", "post", ("team_id",), sortable=_POST_COLUMNS),
    )
}


def get_resource(key: str) -> ListResource:
    """Look up a screen descriptor; raises KeyError for unknown keys."""
    try:
        return RESOURCES[key]
    except KeyError:
        raise KeyError(f"Unknown list screen: {key!r}") from None
