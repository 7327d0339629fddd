"""Pagination, sort and free-filter state with the scope always re-derived.

The scope half of a :class:`FilterState` is never stored. Every snapshot
asks the scope provider for the current :class:`EffectiveScope`, so a scope
computed for an earlier identity or override cannot be resubmitted, and
scope-shaped keys arriving through the free-filter path are discarded.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

import structlog

from leaguescope.constants import (
    CTX_LEAGUE_PARAM,
    CTX_SEASON_PARAM,
    CTX_TEAM_PARAM,
    CTX_TENANT_PARAM,
    DEFAULT_PAGE_SIZE,
    DEFAULT_SORT_BY,
    LEGACY_CTX_PARAMS,
    MAX_PAGE_SIZE,
    MIN_PAGE_SIZE,
    SCOPE_QUERY_KEYS,
)
from leaguescope.models.identity import EffectiveScope
from leaguescope.types import SortOrder
from leaguescope.utils.sanitize import format_query_value, is_blank, to_camel_key

logger = structlog.get_logger(__name__)

ScopeProvider = Callable[[], EffectiveScope]

# Keys the free-filter path may never set
_PROTECTED_KEYS = frozenset(
    {
        *SCOPE_QUERY_KEYS,
        CTX_TENANT_PARAM,
        CTX_LEAGUE_PARAM,
        CTX_SEASON_PARAM,
        CTX_TEAM_PARAM,
        *LEGACY_CTX_PARAMS,
    }
)
_PAGING_KEYS = frozenset({"page", "pageSize", "sortBy", "sortOrder"})
_PROTECTED_FOLDED = frozenset(k.lower() for k in _PROTECTED_KEYS)
_PAGING_FOLDED = frozenset(k.lower() for k in _PAGING_KEYS)


def _folded(key: str) -> str:
    """``tenantId[]`` and ``TENANTID[0]`` both fold to ``tenantid``."""
    return key.split("[", 1)[0].strip().lower()


def _is_reserved(key: str) -> bool:
    folded = _folded(key)
    return folded in _PROTECTED_FOLDED or folded in _PAGING_FOLDED


def serialize_query(values: Mapping[str, Any]) -> list[tuple[str, str]]:
    """Flatten ``values`` into query pairs.

    Blank values are omitted, lists repeat their key, booleans become
    ``true``/``false``.
    """
    pairs: list[tuple[str, str]] = []
    for key, value in values.items():
        if is_blank(value):
            continue
        if isinstance(value, (list, tuple, set, frozenset)):
            items: Iterable[Any] = sorted(value, key=str) if isinstance(value, (set, frozenset)) else value
            pairs.extend((key, format_query_value(item)) for item in items if not is_blank(item))
        else:
            pairs.append((key, format_query_value(value)))
    return pairs


@dataclass(frozen=True, slots=True)
class FilterState:
    """Immutable snapshot of one list screen's query."""

    page: int
    page_size: int
    sort_by: str
    sort_order: SortOrder
    scope: EffectiveScope
    filters: dict[str, Any] = field(default_factory=dict)

    def as_flat(self) -> dict[str, Any]:
        """Transport shape: free filters, then paging, then scope (scope wins)."""
        flat: dict[str, Any] = {k: v for k, v in self.filters.items() if not _is_reserved(k)}
        flat.update(
            page=self.page,
            pageSize=self.page_size,
            sortBy=self.sort_by,
            sortOrder=self.sort_order.value,
        )
        flat.update(self.scope.as_query())
        return flat

    def to_query_params(self) -> list[tuple[str, str]]:
        return serialize_query(self.as_flat())


class ScopedFilterState:
    """Per-screen store for pagination, sort and free filters.

    Mutators never raise. Out-of-range pages and page sizes are clamped.
    """

    def __init__(
        self,
        scope_provider: ScopeProvider,
        *,
        sort_by: str = DEFAULT_SORT_BY,
        sort_order: SortOrder = SortOrder.DESC,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: int = MAX_PAGE_SIZE,
        sortable: Iterable[str] | None = None,
        initial_filters: Mapping[str, Any] | None = None,
    ) -> None:
        self._scope_provider = scope_provider
        self._max_page_size = max(MIN_PAGE_SIZE, min(max_page_size, MAX_PAGE_SIZE))
        self._sortable = frozenset(sortable or ())
        self._default_filters = {
            k: v for k, v in self._clean(initial_filters or {}).items() if v is not None
        }
        self._page = 1
        self._page_size = self._clamp_page_size(page_size)
        self._sort_by = sort_by
        self._sort_order = SortOrder(sort_order)
        self._filters: dict[str, Any] = dict(self._default_filters)

    # -- reads ---------------------------------------------------------------

    @property
    def state(self) -> FilterState:
        return self.snapshot()

    def snapshot(self) -> FilterState:
        return FilterState(
            page=self._page,
            page_size=self._page_size,
            sort_by=self._sort_by,
            sort_order=self._sort_order,
            scope=self._scope_provider(),
            filters=dict(self._filters),
        )

    @property
    def scope(self) -> EffectiveScope:
        return self._scope_provider()

    @property
    def page(self) -> int:
        return self._page

    @property
    def filters(self) -> dict[str, Any]:
        return dict(self._filters)

    # -- mutators ------------------------------------------------------------

    def set_free_filters(self, partial: Mapping[str, Any] | None = None, **kwargs: Any) -> None:
        """Merge filters; a None or blank value clears that key. Resets page to 1."""
        updates = self._clean({**(partial or {}), **kwargs})
        for key, value in updates.items():
            if value is None:
                self._filters.pop(key, None)
            else:
                self._filters[key] = value
        self._page = 1

    def set_page(self, page: int) -> None:
        self._page = max(1, int(page))

    def set_page_size(self, page_size: int) -> None:
        self._page_size = self._clamp_page_size(page_size)
        self._page = 1

    def set_sort(self, column: str) -> bool:
        """Toggle order on the current column, else sort ascending by ``column``.

        Returns False (and changes nothing) for a column the screen cannot sort by.
        """
        if self._sortable and column not in self._sortable:
            logger.debug("sort_column_rejected", column=column)
            return False
        if column == self._sort_by:
            self._sort_order = SortOrder.DESC if self._sort_order is SortOrder.ASC else SortOrder.ASC
        else:
            self._sort_by = column
            self._sort_order = SortOrder.ASC
        self._page = 1
        return True

    def clear_all(self) -> None:
        """Back to the screen's initial free filters on page 1; sort and size kept."""
        self._filters = dict(self._default_filters)
        self._page = 1

    def rescope(self) -> None:
        """Called after the identity or override changed; restarts at page 1."""
        self._page = 1

    # -- helpers -------------------------------------------------------------

    def _clamp_page_size(self, page_size: int) -> int:
        try:
            size = int(page_size)
        except (TypeError, ValueError):
            return min(DEFAULT_PAGE_SIZE, self._max_page_size)
        return max(MIN_PAGE_SIZE, min(size, self._max_page_size))

    def _clean(self, values: Mapping[str, Any]) -> dict[str, Any]:
        cleaned: dict[str, Any] = {}
        dropped: list[str] = []
        for raw_key, value in values.items():
            key = to_camel_key(raw_key)
            if _is_reserved(key):
                dropped.append(key)
                continue
            cleaned[key] = None if is_blank(value) else value
        if dropped:
            logger.debug("free_filter_keys_dropped", keys=dropped)
        return cleaned
