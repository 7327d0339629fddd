"""Async client for the league REST backend's list and delete endpoints."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

import httpx
import structlog
from pydantic import ValidationError

from leaguescope.config.settings import Settings, get_settings
from leaguescope.exceptions import ApiError
from leaguescope.models.api import ApiErrorBody, PaginatedResponse
from leaguescope.utils.retry import retry

logger = structlog.get_logger(__name__)

QueryParams = Sequence[tuple[str, str]]


class ListApi(Protocol):
    """What a list controller needs from the backend."""

    async def list(self, resource: str, params: QueryParams) -> PaginatedResponse: ...

    async def delete(self, resource: str, item_id: str) -> None: ...


def _error_message(response: httpx.Response) -> str:
    fallback = f"Request failed with status {response.status_code}"
    try:
        body = ApiErrorBody.model_validate(response.json())
    except (ValueError, ValidationError):
        return fallback
    return body.text() or fallback


class LeagueApiClient:
    """Thin httpx wrapper; one AsyncClient per instance.

    Usage::

        async with LeagueApiClient(token=access_token) as api:
            page = await api.list("seasons", [("tenantId", "T1")])
    """

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        *,
        timeout: float | None = None,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._base_url = (base_url or settings.api_base_url).rstrip("/")
        self._max_attempts = settings.api_max_attempts
        self._retry_delay_ms = settings.api_retry_delay_ms
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers=headers,
            timeout=timeout if timeout is not None else settings.api_timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> LeagueApiClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def list(self, resource: str, params: QueryParams) -> PaginatedResponse:
        """GET ``/{resource}`` with repeated-key query params; validates the envelope."""
        path = "/" + resource.strip("/")
        fetch = retry(
            max_attempts=self._max_attempts,
            delay_ms=self._retry_delay_ms,
            retry_on=(httpx.TransportError,),
        )(self._get)
        try:
            response = await fetch(path, list(params))
        except httpx.HTTPError as exc:
            logger.warning("list_request_failed", resource=resource, error=str(exc))
            raise ApiError(f"Could not reach the server: {exc}") from exc

        if response.is_error:
            message = _error_message(response)
            logger.warning(
                "list_request_rejected",
                resource=resource,
                status_code=response.status_code,
                message=message,
            )
            raise ApiError(message, status_code=response.status_code)

        try:
            payload: Any = response.json()
        except ValueError as exc:
            raise ApiError("Server returned a malformed response", response.status_code) from exc
        return PaginatedResponse.model_validate(payload)

    async def delete(self, resource: str, item_id: str) -> None:
        """DELETE ``/{resource}/{id}``. Not retried."""
        path = f"/{resource.strip('/')}/{item_id}"
        try:
            response = await self._client.delete(path)
        except httpx.HTTPError as exc:
            logger.warning("delete_request_failed", resource=resource, item_id=item_id)
            raise ApiError(f"Could not reach the server: {exc}") from exc
        if response.is_error:
            message = _error_message(response)
            logger.warning(
                "delete_request_rejected",
                resource=resource,
                item_id=item_id,
                status_code=response.status_code,
                message=message,
            )
            raise ApiError(message, status_code=response.status_code)
        logger.info("delete_request_ok", resource=resource, item_id=item_id)

    async def _get(self, path: str, params: list[tuple[str, str]]) -> httpx.Response:
        return await self._client.get(path, params=params)
