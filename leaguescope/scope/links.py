"""Context-preserving navigation links."""

from __future__ import annotations

from urllib.parse import unquote_plus, urlencode, urlsplit, urlunsplit

from leaguescope.constants import (
    CTX_LEAGUE_PARAM,
    CTX_SEASON_PARAM,
    CTX_TEAM_PARAM,
    CTX_TENANT_PARAM,
    LEGACY_CTX_PARAMS,
)
from leaguescope.models.identity import ContextOverride, EffectiveScope


def context_params(scope: EffectiveScope, season_id: str | None = None) -> list[tuple[str, str]]:
    """The ``ctx*`` pairs for every set field, in tenant/league/season/team order."""
    candidates = (
        (CTX_TENANT_PARAM, scope.tenant_id),
        (CTX_LEAGUE_PARAM, scope.league_id),
        (CTX_SEASON_PARAM, season_id),
        (CTX_TEAM_PARAM, scope.team_id),
    )
    return [(key, value) for key, value in candidates if value]


def build_link(path: str, scope: EffectiveScope, season_id: str | None = None) -> str:
    """Re-attach the current context to ``path`` as query parameters.

    Existing parameters on ``path`` are kept in place; a ``ctx*`` key that is
    about to be written is dropped from the existing set first (along with its
    legacy ``context*`` spelling), so no key is ever emitted twice.
    """
    ctx = context_params(scope, season_id)
    if not ctx:
        return path

    parts = urlsplit(path)
    replaced = {key for key, _ in ctx}
    replaced |= {legacy for legacy, current in LEGACY_CTX_PARAMS.items() if current in replaced}
    # Untouched segments are copied byte for byte
    kept = [
        segment
        for segment in parts.query.split("&")
        if segment and unquote_plus(segment.split("=", 1)[0]) not in replaced
    ]
    query = "&".join([*kept, urlencode(ctx)])
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


class ContextualLinkBuilder:
    """Builds links bound to one screen's resolved scope and drill-in season."""

    def __init__(self, scope: EffectiveScope, season_id: str | None = None) -> None:
        self._scope = scope
        self._season_id = season_id

    @classmethod
    def for_override(cls, scope: EffectiveScope, override: ContextOverride) -> ContextualLinkBuilder:
        return cls(scope, season_id=override.season_id)

    @property
    def scope(self) -> EffectiveScope:
        return self._scope

    def build(self, path: str) -> str:
        return build_link(path, self._scope, self._season_id)

    def query(self) -> str:
        """Bare query string (no leading ``?``) for the bound context."""
        return urlencode(context_params(self._scope, self._season_id))
