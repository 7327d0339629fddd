"""Explicit confirmation step for destructive list actions."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Protocol

import structlog

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class PendingConfirmation:
    """A destructive action waiting on the user."""

    action: str  # delete
    resource: str
    item_id: str
    message: str


class Confirmer(Protocol):
    async def confirm(self, request: PendingConfirmation) -> bool:
        """Return True only if the user approved ``request``."""
        ...


class StaticConfirmer:
    """Answers every request the same way. Declines unless told otherwise."""

    def __init__(self, answer: bool = False) -> None:
        self._answer = answer
        self.requests: list[PendingConfirmation] = []

    async def confirm(self, request: PendingConfirmation) -> bool:
        self.requests.append(request)
        return self._answer


class DeferredConfirmer:
    """Parks each request until the UI calls :meth:`resolve`.

    ``pending`` exposes the request so a dialog can be rendered for it.
    """

    def __init__(self) -> None:
        self._pending: PendingConfirmation | None = None
        self._future: asyncio.Future[bool] | None = None

    @property
    def pending(self) -> PendingConfirmation | None:
        return self._pending

    async def confirm(self, request: PendingConfirmation) -> bool:
        if self._future is not None and not self._future.done():
            # A newer prompt replaces the old one; the old action is declined
            self._future.set_result(False)
        loop = asyncio.get_running_loop()
        self._pending = request
        self._future = loop.create_future()
        try:
            return await self._future
        finally:
            if self._pending is request:
                self._pending = None

    def resolve(self, approved: bool) -> bool:
        """Answer the pending request. Returns False if nothing was pending."""
        if self._future is None or self._future.done():
            logger.debug("confirmation_resolve_without_pending")
            return False
        self._future.set_result(approved)
        return True
