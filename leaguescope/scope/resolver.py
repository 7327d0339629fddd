"""Effective scope resolution from identity and URL context override.

Precedence is fixed: the dominant role (highest rank) alone decides which
fields come from the identity and which may come from the override.

======================  ===============  ==================  ==============
Dominant role           tenant_id        league_id           team_id
======================  ===============  ==================  ==============
SYSTEM_ADMIN            override         override            override
TENANT_ADMIN            identity         override            override
LEAGUE_ADMIN            identity         identity            override
TEAM_ADMIN              identity         identity (team's)   identity
GENERAL_USER / none     unset            unset               unset
======================  ===============  ==================  ==============
"""

from __future__ import annotations

import structlog

from leaguescope.models.identity import ContextOverride, EffectiveScope, UserIdentity
from leaguescope.scope import hierarchy
from leaguescope.types import Role

logger = structlog.get_logger(__name__)

SCOPE_FIELDS = ("tenant_id", "league_id", "team_id")

# Fields a role may take from the drill-in override instead of leaving unset
_OVERRIDABLE: dict[Role, frozenset[str]] = {
    Role.SYSTEM_ADMIN: frozenset({"tenant_id", "league_id", "team_id"}),
    Role.TENANT_ADMIN: frozenset({"league_id", "team_id"}),
    Role.LEAGUE_ADMIN: frozenset({"team_id"}),
    Role.TEAM_ADMIN: frozenset(),
    Role.GENERAL_USER: frozenset(),
}


class ContextResolver:
    """Computes the EffectiveScope for a (identity, override) pair.

    Total over its inputs: never raises and never performs I/O.
    """

    def resolve(
        self,
        identity: UserIdentity | None,
        override: ContextOverride | None = None,
    ) -> EffectiveScope:
        override = override or ContextOverride()
        if identity is None:
            return EffectiveScope()

        role = hierarchy.dominant_role(identity.roles)
        if role is None or role is Role.GENERAL_USER:
            logger.debug("scope_resolved", user_id=identity.id, role=role, scope="none")
            return EffectiveScope()

        sources = hierarchy.default_scope_sources(role)
        overridable = _OVERRIDABLE[role]
        values: dict[str, str | None] = {}
        for name in SCOPE_FIELDS:
            if name in sources:
                values[name] = getattr(identity, sources[name])
            elif name in overridable:
                values[name] = getattr(override, name)
            else:
                values[name] = None

        scope = EffectiveScope(**values)
        if not override.is_empty:
            ignored = [
                name
                for name in SCOPE_FIELDS
                if getattr(override, name) is not None and name not in overridable
            ]
            if ignored:
                logger.debug(
                    "override_fields_ignored", user_id=identity.id, role=role, fields=ignored
                )
        logger.debug(
            "scope_resolved",
            user_id=identity.id,
            role=role,
            tenant_id=scope.tenant_id,
            league_id=scope.league_id,
            team_id=scope.team_id,
        )
        return scope


_default_resolver = ContextResolver()


def resolve_scope(
    identity: UserIdentity | None, override: ContextOverride | None = None
) -> EffectiveScope:
    """Module-level shortcut for :meth:`ContextResolver.resolve`."""
    return _default_resolver.resolve(identity, override)
