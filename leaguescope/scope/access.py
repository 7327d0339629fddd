"""Console-section gates: who may open which admin area, and with what context."""

from __future__ import annotations

import structlog

from leaguescope.models.identity import EffectiveScope, UserIdentity
from leaguescope.scope import hierarchy
from leaguescope.types import ConsoleSection, Role

logger = structlog.get_logger(__name__)

PUBLIC_PATHS = frozenset(
    {
        "/",
        "/about",
        "/help",
        "/explore",
        "/login",
        "/register",
        "/access-denied",
        "/blog",
        "/contact",
        "/pricing",
        "/features",
        "/terms",
        "/privacy",
    }
)
# Public profile trees: the prefix itself and anything below it
PUBLIC_PREFIXES = ("/leagues", "/teams", "/players", "/seasons", "/public")

# Checked in order; "/teams" is public, so "/team" must match a whole segment
_SECTION_PREFIXES: tuple[tuple[str, ConsoleSection], ...] = (
    ("/admin", ConsoleSection.ADMIN),
    ("/tenant", ConsoleSection.TENANT),
    ("/league", ConsoleSection.LEAGUE),
    ("/team", ConsoleSection.TEAM),
    ("/account", ConsoleSection.ACCOUNT),
    ("/season", ConsoleSection.ACCOUNT),
    ("/player", ConsoleSection.ACCOUNT),
    ("/coach", ConsoleSection.ACCOUNT),
    ("/referee", ConsoleSection.ACCOUNT),
)

_MINIMUM_ROLE: dict[ConsoleSection, Role] = {
    ConsoleSection.ADMIN: Role.SYSTEM_ADMIN,
    ConsoleSection.TENANT: Role.TENANT_ADMIN,
    ConsoleSection.LEAGUE: Role.LEAGUE_ADMIN,
    ConsoleSection.TEAM: Role.TEAM_ADMIN,
}

_DENIED_REASONS: dict[ConsoleSection, str] = {
    ConsoleSection.ADMIN: "system_admin_only",
    ConsoleSection.TENANT: "tenant_access_required",
    ConsoleSection.LEAGUE: "league_access_required",
    ConsoleSection.TEAM: "team_access_required",
}

_REQUIRED_SCOPE: dict[ConsoleSection, tuple[str, ...]] = {
    ConsoleSection.TENANT: ("tenant_id",),
    ConsoleSection.LEAGUE: ("tenant_id", "league_id"),
    ConsoleSection.TEAM: ("tenant_id", "league_id", "team_id"),
}

_HOME_SECTION: dict[Role, ConsoleSection] = {
    Role.SYSTEM_ADMIN: ConsoleSection.ADMIN,
    Role.TENANT_ADMIN: ConsoleSection.TENANT,
    Role.LEAGUE_ADMIN: ConsoleSection.LEAGUE,
    Role.TEAM_ADMIN: ConsoleSection.TEAM,
}


def _matches(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix + "/")


def section_for_path(path: str) -> ConsoleSection | None:
    """Classify a request path; None means no section claims it."""
    path = path.split("?", 1)[0].split("#", 1)[0] or "/"
    if len(path) > 1:
        path = path.rstrip("/")
    if path in PUBLIC_PATHS or any(_matches(path, p) for p in PUBLIC_PREFIXES):
        return ConsoleSection.PUBLIC
    for prefix, section in _SECTION_PREFIXES:
        if _matches(path, prefix):
            return section
    return None


def can_access(identity: UserIdentity | None, section: ConsoleSection | None) -> bool:
    """Whether ``identity`` may open ``section``.

    Higher roles inherit every lower console. Unclaimed paths are denied.
    """
    if section is ConsoleSection.PUBLIC:
        return True
    if identity is None or not identity.roles or section is None:
        return False
    if section is ConsoleSection.ACCOUNT:
        return True
    top = hierarchy.dominant_role(identity.roles)
    return top is not None and hierarchy.at_least(top, _MINIMUM_ROLE[section])


def access_denied_reason(section: ConsoleSection | None) -> str:
    if section is None:
        return "unauthorized_path"
    return _DENIED_REASONS.get(section, "unauthorized_path")


def check_path(identity: UserIdentity | None, path: str) -> str | None:
    """Return a denial reason for ``path``, or None when access is allowed."""
    section = section_for_path(path)
    if can_access(identity, section):
        return None
    reason = access_denied_reason(section)
    logger.info(
        "console_access_denied",
        path=path,
        user_id=identity.id if identity else None,
        reason=reason,
    )
    return reason


def required_scope_fields(section: ConsoleSection | None) -> tuple[str, ...]:
    if section is None:
        return ()
    return _REQUIRED_SCOPE.get(section, ())


def has_required_context(scope: EffectiveScope, section: ConsoleSection | None) -> bool:
    """True when every field the section needs is present in ``scope``."""
    return not scope.missing(required_scope_fields(section))


def is_home_section(identity: UserIdentity | None, path: str) -> bool:
    """True when ``path`` is inside the console the user's dominant role calls home."""
    if identity is None:
        return False
    section = section_for_path(path)
    if section is None:
        return False
    top = hierarchy.dominant_role(identity.roles)
    return top is not None and _HOME_SECTION.get(top) is section
