"""Enums and type aliases for LeagueScope."""

from enum import StrEnum


class Role(StrEnum):
    SYSTEM_ADMIN = "SYSTEM_ADMIN"
    TENANT_ADMIN = "TENANT_ADMIN"
    LEAGUE_ADMIN = "LEAGUE_ADMIN"
    TEAM_ADMIN = "TEAM_ADMIN"
    GENERAL_USER = "GENERAL_USER"


class SortOrder(StrEnum):
    ASC = "asc"
    DESC = "desc"


class ListStatus(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class ErrorKind(StrEnum):
    MISSING_SCOPE = "missing_scope"
    FETCH = "fetch"
    MUTATION = "mutation"


class ConsoleSection(StrEnum):
    ADMIN = "admin"
    TENANT = "tenant"
    LEAGUE = "league"
    TEAM = "team"
    ACCOUNT = "account"
    PUBLIC = "public"
