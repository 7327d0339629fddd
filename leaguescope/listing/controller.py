"""Fetch/guard/mutate/refetch life cycle for one scoped list screen.

States: ``IDLE -> LOADING -> READY | ERROR``; READY and ERROR go back to
LOADING on any filter change or explicit refresh. A guard short-circuits to
ERROR (``missing_scope``) without touching the network when a field the
screen requires is unset.

Every fetch takes a sequence number. A completion whose number is not the
latest issued is dropped, so the last mutation always decides what is shown
even when responses arrive out of order.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from leaguescope.config.settings import Settings, get_settings
from leaguescope.exceptions import (
    FetchError,
    LeagueScopeError,
    MissingScopeError,
    MutationError,
    StaleResultDiscarded,
)
from leaguescope.listing.confirm import Confirmer, PendingConfirmation, StaticConfirmer
from leaguescope.listing.debounce import Debouncer
from leaguescope.listing.filters import FilterState, ScopedFilterState
from leaguescope.listing.notify import LogNotifier, Notifier
from leaguescope.listing.resources import ListResource, get_resource
from leaguescope.models.identity import ContextOverride, EffectiveScope, UserIdentity
from leaguescope.scope import hierarchy
from leaguescope.scope.links import ContextualLinkBuilder
from leaguescope.scope.resolver import ContextResolver
from leaguescope.types import ErrorKind, ListStatus, Role

if TYPE_CHECKING:
    from leaguescope.client.api import ListApi
    from leaguescope.models.api import PaginatedResponse

logger = structlog.get_logger(__name__)

# Default for update_context: keep the current identity
_KEEP: Any = object()


@dataclass(frozen=True, slots=True)
class ListState:
    """What a table screen renders."""

    status: ListStatus = ListStatus.IDLE
    items: list[dict[str, Any]] = field(default_factory=list)
    total_items: int = 0
    total_pages: int = 0
    current_page: int = 1
    error: str | None = None
    error_kind: ErrorKind | None = None
    missing_field: str | None = None
    pending_confirmation: PendingConfirmation | None = None

    @property
    def has_stale_items(self) -> bool:
        """True while an error banner sits over last-known-good rows."""
        return self.status is ListStatus.ERROR and bool(self.items)

    @property
    def show_table(self) -> bool:
        return self.error_kind is not ErrorKind.MISSING_SCOPE


class ScopedListController:
    """Owns one screen's FilterState, response cache and request counter.

    Instances share nothing; never hand one ScopedFilterState to two
    controllers.
    """

    def __init__(
        self,
        api: ListApi,
        resource: ListResource | str,
        identity: UserIdentity | None,
        override: ContextOverride | None = None,
        *,
        confirmer: Confirmer | None = None,
        notifier: Notifier | None = None,
        settings: Settings | None = None,
        resolver: ContextResolver | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._api = api
        self._resource = get_resource(resource) if isinstance(resource, str) else resource
        self._resolver = resolver or ContextResolver()
        self._confirmer: Confirmer = confirmer or StaticConfirmer(answer=False)
        self._notifier: Notifier = notifier or LogNotifier()
        self._identity = identity
        self._override = override or ContextOverride()
        self._scope = self._resolver.resolve(identity, self._override)
        self._seq = 0
        self._state = ListState()
        self._debouncer = Debouncer(self._settings.search_debounce_ms)
        self._log = logger.bind(screen=self._resource.key)

        self.filters = ScopedFilterState(
            self._current_scope,
            sort_by=self._resource.sort_by,
            sort_order=self._resource.sort_order,
            page_size=self._resource.page_size or self._settings.default_page_size,
            max_page_size=self._settings.max_page_size,
            sortable=self._resource.sortable,
        )

    # -- reads ---------------------------------------------------------------

    @property
    def state(self) -> ListState:
        return self._state

    @property
    def resource(self) -> ListResource:
        return self._resource

    @property
    def scope(self) -> EffectiveScope:
        return self._scope

    @property
    def override(self) -> ContextOverride:
        return self._override

    @property
    def links(self) -> ContextualLinkBuilder:
        return ContextualLinkBuilder.for_override(self._scope, self._override)

    @property
    def latest_seq(self) -> int:
        return self._seq

    def _current_scope(self) -> EffectiveScope:
        return self._scope

    def _is_system_admin(self) -> bool:
        if self._identity is None:
            return False
        return hierarchy.dominant_role(self._identity.roles) is Role.SYSTEM_ADMIN

    # -- life cycle ----------------------------------------------------------

    async def refresh(self) -> ListState:
        """Run the scope guard, then fetch with the current FilterState.

        An all-unset scope is only sufficient for a system administrator;
        anyone else is blocked even on screens that require no field.
        """
        missing = self._scope.missing(self._resource.required_scope)
        if not missing and self._scope.is_global and not self._is_system_admin():
            missing = ["tenant_id"]
        if missing:
            return self._block(MissingScopeError(missing[0]))
        return await self._fetch(self.filters.snapshot())

    async def update_context(
        self,
        identity: UserIdentity | None = _KEEP,
        override: ContextOverride | None = None,
    ) -> ListState:
        """Re-resolve scope after a sign-in change or navigation, then refetch.

        Omitting ``identity`` keeps the current one; an explicit None signs out.
        """
        if identity is not _KEEP:
            self._identity = identity
        if override is not None:
            self._override = override
        previous = self._scope
        self._scope = self._resolver.resolve(self._identity, self._override)
        if self._scope != previous:
            self._log.info(
                "scope_changed",
                tenant_id=self._scope.tenant_id,
                league_id=self._scope.league_id,
                team_id=self._scope.team_id,
            )
            self.filters.rescope()
        return await self.refresh()

    async def on_filter_change(self, partial: dict[str, Any] | None = None, **kwargs: Any) -> ListState:
        self.filters.set_free_filters(partial, **kwargs)
        return await self.refresh()

    async def on_page_change(self, page: int) -> ListState:
        self.filters.set_page(page)
        return await self.refresh()

    async def on_page_size_change(self, page_size: int) -> ListState:
        self.filters.set_page_size(page_size)
        return await self.refresh()

    async def on_sort_change(self, column: str) -> ListState:
        if not self.filters.set_sort(column):
            return self._state
        return await self.refresh()

    async def on_clear_filters(self) -> ListState:
        self.filters.clear_all()
        return await self.refresh()

    def on_search(self, text: str) -> None:
        """Debounced free-text search; only the last keystroke in a burst fetches."""
        self._debouncer.schedule(lambda: self.on_filter_change(search=text))

    async def flush_search(self) -> None:
        await self._debouncer.flush()

    async def on_delete(self, item_id: str, *, name: str | None = None) -> bool:
        """Confirm, delete, then refetch with the unchanged FilterState.

        Returns True only when the item was deleted.
        """
        label = self._resource.label
        subject = f"{label} {name!r}" if name else f"this {label}"
        request = PendingConfirmation(
            action="delete",
            resource=self._resource.endpoint,
            item_id=item_id,
            message=f"Are you sure you want to delete {subject}? This action cannot be undone.",
        )
        self._state = replace(self._state, pending_confirmation=request)
        try:
            approved = await self._confirmer.confirm(request)
        finally:
            self._state = replace(self._state, pending_confirmation=None)

        if not approved:
            self._log.info("delete_cancelled", item_id=item_id)
            return False

        try:
            await self._api.delete(self._resource.endpoint, item_id)
        except LeagueScopeError as exc:
            err = MutationError(str(exc))
            self._log.warning("delete_failed", item_id=item_id, error=str(err))
            self._notifier.error(f"Error deleting {label}", str(err))
            return False

        self._log.info("delete_confirmed", item_id=item_id)
        self._notifier.success(f"{label.capitalize()} deleted successfully.")
        await self.refresh()
        await self._settle_page()
        return True

    async def aclose(self) -> None:
        """Drop any pending debounced search and invalidate in-flight fetches."""
        self._debouncer.cancel()
        self._seq += 1

    # -- internals -----------------------------------------------------------

    def _block(self, error: MissingScopeError) -> ListState:
        self._seq += 1  # anything still in flight is now stale
        self._log.info("list_blocked_missing_scope", field=error.field)
        self._state = ListState(
            status=ListStatus.ERROR,
            error=str(error),
            error_kind=ErrorKind.MISSING_SCOPE,
            missing_field=error.field,
        )
        return self._state

    async def _fetch(self, snapshot: FilterState) -> ListState:
        self._seq += 1
        seq = self._seq
        params = snapshot.to_query_params()
        self._state = replace(
            self._state,
            status=ListStatus.LOADING,
            error=None,
            error_kind=None,
            missing_field=None,
        )
        self._log.debug("list_fetch_issued", seq=seq, params=params)

        try:
            response = await self._api.list(self._resource.endpoint, params)
        except (LeagueScopeError, ValidationError) as exc:
            return self._fail(seq, exc)

        try:
            self._check_latest(seq)
        except StaleResultDiscarded as stale:
            self._log.debug("stale_result_discarded", seq=stale.seq, latest=stale.latest)
            return self._state
        return self._succeed(seq, snapshot, response)

    def _check_latest(self, seq: int) -> None:
        if seq != self._seq:
            raise StaleResultDiscarded(seq, self._seq)

    def _succeed(self, seq: int, snapshot: FilterState, response: PaginatedResponse) -> ListState:
        self._state = ListState(
            status=ListStatus.READY,
            items=list(response.data),
            total_items=response.total_items,
            total_pages=response.total_pages,
            current_page=snapshot.page,
        )
        self._log.info(
            "list_fetched",
            seq=seq,
            total_items=response.total_items,
            total_pages=response.total_pages,
            page=snapshot.page,
        )
        return self._state

    def _fail(self, seq: int, exc: Exception) -> ListState:
        try:
            self._check_latest(seq)
        except StaleResultDiscarded:
            self._log.debug("stale_error_discarded", seq=seq, latest=self._seq)
            return self._state

        if isinstance(exc, LeagueScopeError):
            err = FetchError(str(exc))
        else:
            err = FetchError(f"Unexpected response for {self._resource.endpoint}.")
        self._log.warning("list_fetch_failed", seq=seq, error=str(err))
        # Keep the last good rows visible under the error
        self._state = replace(
            self._state,
            status=ListStatus.ERROR,
            error=str(err),
            error_kind=ErrorKind.FETCH,
        )
        self._notifier.error(f"Error fetching {self._resource.endpoint}", str(err))
        return self._state

    async def _settle_page(self) -> None:
        """After a removal, step back if the current page no longer exists."""
        state = self._state
        if state.status is not ListStatus.READY or state.total_pages < 1:
            return
        if self.filters.page > state.total_pages:
            self._log.debug(
                "page_out_of_range", page=self.filters.page, total_pages=state.total_pages
            )
            self.filters.set_page(state.total_pages)
            await self.refresh()
