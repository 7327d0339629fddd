"""Shared constants: transport names and bounds."""

# Context-override query parameters carried on console URLs
CTX_TENANT_PARAM = "ctxTenantId"
CTX_LEAGUE_PARAM = "ctxLeagueId"
CTX_SEASON_PARAM = "ctxSeasonId"
CTX_TEAM_PARAM = "ctxTeamId"

# Older screens used the long form; accepted on read, never written
LEGACY_CTX_PARAMS = {
    "contextTenantId": CTX_TENANT_PARAM,
    "contextLeagueId": CTX_LEAGUE_PARAM,
    "contextTeamId": CTX_TEAM_PARAM,
}

# Scope fields as they appear in list queries
SCOPE_QUERY_KEYS = ("tenantId", "leagueId", "teamId")

DEFAULT_PAGE_SIZE = 10
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100
DEFAULT_SORT_BY = "createdAt"
DEFAULT_SEARCH_DEBOUNCE_MS = 500
