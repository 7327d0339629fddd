"""Signed-in identity, URL context overrides and the resolved scope."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, fields
from typing import Any
from urllib.parse import parse_qs

import structlog
from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel

from leaguescope.constants import (
    CTX_LEAGUE_PARAM,
    CTX_SEASON_PARAM,
    CTX_TEAM_PARAM,
    CTX_TENANT_PARAM,
    LEGACY_CTX_PARAMS,
)
from leaguescope.types import Role

logger = structlog.get_logger(__name__)

# Participant roles the backend issues that carry no administrative scope
_GENERAL_TIER_ALIASES = frozenset({"PLAYER", "COACH", "REFEREE"})


def parse_roles(values: Iterable[str | Role]) -> frozenset[Role]:
    """Map raw role strings onto the closed Role set.

    Participant roles collapse to GENERAL_USER; anything unknown is dropped.
    """
    roles: set[Role] = set()
    for value in values:
        if isinstance(value, Role):
            roles.add(value)
            continue
        name = str(value).strip().upper()
        if name in Role.__members__:
            roles.add(Role(name))
        elif name in _GENERAL_TIER_ALIASES:
            roles.add(Role.GENERAL_USER)
        else:
            logger.debug("unknown_role_ignored", role=value)
    return frozenset(roles)


def _clean_id(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    if not text or text in ("undefined", "null"):
        return None
    return text


class UserIdentity(BaseModel):
    """The signed-in user as returned by ``/auth/me`` or the login response.

    Accepts the backend's camelCase payload (``managingLeagueId``, nested
    ``managingTeam``) as well as snake_case keyword arguments.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    id: str
    roles: frozenset[Role] = frozenset()
    tenant_id: str | None = None
    managing_league_id: str | None = None
    managing_team_id: str | None = None
    managing_team_league_id: str | None = None  # league of the managed team

    @field_validator("roles", mode="before")
    @classmethod
    def _coerce_roles(cls, value: Any) -> frozenset[Role]:
        if value is None:
            return frozenset()
        if isinstance(value, str):
            value = [value]
        return parse_roles(value)

    @field_validator(
        "tenant_id",
        "managing_league_id",
        "managing_team_id",
        "managing_team_league_id",
        mode="before",
    )
    @classmethod
    def _blank_to_none(cls, value: Any) -> str | None:
        return _clean_id(value)

    @model_validator(mode="before")
    @classmethod
    def _lift_nested_refs(cls, data: Any) -> Any:
        """Fill flat ids from the nested ``tenant``/``managingLeague``/``managingTeam`` objects."""
        if not isinstance(data, Mapping):
            return data
        data = dict(data)
        nested = {
            "tenantId": ("tenant", "id"),
            "managingLeagueId": ("managingLeague", "id"),
            "managingTeamId": ("managingTeam", "id"),
            "managingTeamLeagueId": ("managingTeam", "leagueId"),
        }
        for flat_key, (obj_key, attr) in nested.items():
            snake_key = _to_snake(flat_key)
            if data.get(flat_key) or data.get(snake_key):
                continue
            obj = data.get(obj_key)
            if isinstance(obj, Mapping) and obj.get(attr):
                data[flat_key] = obj[attr]
        return data

    def has_role(self, role: Role) -> bool:
        return role in self.roles


def _to_snake(name: str) -> str:
    return "".join(f"_{c.lower()}" if c.isupper() else c for c in name)


@dataclass(frozen=True, slots=True)
class ContextOverride:
    """Drill-in identifiers read from the hosting page's query string."""

    tenant_id: str | None = None
    league_id: str | None = None
    season_id: str | None = None
    team_id: str | None = None

    @classmethod
    def from_query(cls, query: str | Mapping[str, Any] | None) -> ContextOverride:
        """Parse ``ctx*`` parameters from a raw query string or a mapping.

        Mapping values may be a string or a list of strings (first wins).
        Legacy ``context*`` names are accepted when the short name is absent.
        """
        if not query:
            return cls()
        if isinstance(query, str):
            params: Mapping[str, Any] = parse_qs(query.lstrip("?"), keep_blank_values=True)
        else:
            params = query

        def first(name: str) -> str | None:
            raw = params.get(name)
            if isinstance(raw, (list, tuple)):
                raw = raw[0] if raw else None
            value = _clean_id(raw)
            if value is None and raw is not None and str(raw).strip():
                logger.warning("context_override_value_ignored", param=name, value=raw)
            return value

        values: dict[str, str | None] = {
            CTX_TENANT_PARAM: first(CTX_TENANT_PARAM),
            CTX_LEAGUE_PARAM: first(CTX_LEAGUE_PARAM),
            CTX_SEASON_PARAM: first(CTX_SEASON_PARAM),
            CTX_TEAM_PARAM: first(CTX_TEAM_PARAM),
        }
        for legacy, current in LEGACY_CTX_PARAMS.items():
            if values[current] is None:
                values[current] = first(legacy)

        return cls(
            tenant_id=values[CTX_TENANT_PARAM],
            league_id=values[CTX_LEAGUE_PARAM],
            season_id=values[CTX_SEASON_PARAM],
            team_id=values[CTX_TEAM_PARAM],
        )

    @property
    def is_empty(self) -> bool:
        return not any(getattr(self, f.name) for f in fields(self))


@dataclass(frozen=True, slots=True)
class EffectiveScope:
    """Tenant/league/team bound applied to every query a screen issues."""

    tenant_id: str | None = None
    league_id: str | None = None
    team_id: str | None = None

    @property
    def is_global(self) -> bool:
        return self.tenant_id is None and self.league_id is None and self.team_id is None

    def get(self, field_name: str) -> str | None:
        return getattr(self, field_name)

    def missing(self, required: Iterable[str]) -> list[str]:
        """Return the required fields that are unset, in the given order."""
        return [name for name in required if self.get(name) is None]

    def as_query(self) -> dict[str, str]:
        """Transport (camelCase) form with unset fields omitted."""
        pairs = {
            "tenantId": self.tenant_id,
            "leagueId": self.league_id,
            "teamId": self.team_id,
        }
        return {key: value for key, value in pairs.items() if value is not None}
