"""Exception hierarchy for LeagueScope."""

from __future__ import annotations


class LeagueScopeError(Exception):
    """Base exception for all LeagueScope errors."""


class ConfigError(LeagueScopeError):
    """Raised when configuration is invalid."""


class ApiError(LeagueScopeError):
    """Raised when the REST backend call fails or answers with an error status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class MissingScopeError(LeagueScopeError):
    """Raised when a required scope field is absent after resolution."""

    def __init__(self, field: str) -> None:
        self.field = field
        label = field.removesuffix("_id").replace("_", " ").title()
        super().__init__(f"{label} ID not available for your account or current context.")


class FetchError(LeagueScopeError):
    """Raised when a list request fails."""


class MutationError(LeagueScopeError):
    """Raised when a delete (or other mutating) request fails."""


class StaleResultDiscarded(LeagueScopeError):
    """Marks a fetch result superseded by a newer request. Never surfaced."""

    def __init__(self, seq: int, latest: int) -> None:
        super().__init__(f"result of request {seq} superseded by {latest}")
        self.seq = seq
        self.latest = latest
