"""Role ranks and the identity fields that supply each role's default scope.

Every precedence decision in the package routes through :func:`rank` and
:func:`dominant_role`; screens never test role membership directly.
"""

from __future__ import annotations

from collections.abc import Iterable

from leaguescope.types import Role

# Higher number outranks lower
ROLE_RANKS: dict[Role, int] = {
    Role.SYSTEM_ADMIN: 4,
    Role.TENANT_ADMIN: 3,
    Role.LEAGUE_ADMIN: 2,
    Role.TEAM_ADMIN: 1,
    Role.GENERAL_USER: 0,
}

# Scope field -> UserIdentity attribute that supplies it by default
DEFAULT_SCOPE_SOURCES: dict[Role, dict[str, str]] = {
    Role.SYSTEM_ADMIN: {},
    Role.TENANT_ADMIN: {"tenant_id": "tenant_id"},
    Role.LEAGUE_ADMIN: {"tenant_id": "tenant_id", "league_id": "managing_league_id"},
    Role.TEAM_ADMIN: {
        "tenant_id": "tenant_id",
        "league_id": "managing_team_league_id",
        "team_id": "managing_team_id",
    },
    Role.GENERAL_USER: {},
}


def rank(role: Role) -> int:
    return ROLE_RANKS[role]


def outranks(role: Role, other: Role) -> bool:
    """True when ``role`` sits strictly above ``other``."""
    return rank(role) > rank(other)


def at_least(role: Role, minimum: Role) -> bool:
    return rank(role) >= rank(minimum)


def dominant_role(roles: Iterable[Role]) -> Role | None:
    """Return the single highest-ranked role, or None for an empty set."""
    ranked = [r for r in roles if r in ROLE_RANKS]
    if not ranked:
        return None
    return max(ranked, key=rank)


def ordered(roles: Iterable[Role]) -> list[Role]:
    """Roles from most to least privileged."""
    return sorted(set(roles), key=rank, reverse=True)


def default_scope_sources(role: Role | None) -> dict[str, str]:
    """Map of scope field to identity attribute for ``role`` (empty for None)."""
    if role is None:
        return {}
    return dict(DEFAULT_SCOPE_SOURCES[role])
