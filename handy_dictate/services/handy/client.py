"""
Async HTTP client for the Handy speech-to-text API.

Every response arrives in an ``{ok, data, error}`` envelope. Transport
failures become ``ServiceUnreachableError``; bad statuses and ``ok: false``
envelopes become ``ServiceRequestError``. Each call opens its own
``httpx.AsyncClient`` so no connection outlives a single request.
"""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from handy_dictate.core.config import get_settings
from handy_dictate.core.exceptions import (
    DictateError,
    ServiceRequestError,
    ServiceUnreachableError,
)
from handy_dictate.core.models import Envelope, HealthStatus, HistoryEntry

logger = logging.getLogger(__name__)

HEALTH_PATH = "/api/health"
HISTORY_PATH = "/api/history"
TOGGLE_PATH = "/api/transcription/toggle-post-process"


class HandyClient:
    """Typed wrapper around the three Handy endpoints this package uses.

    Args:
        base_url: Handy API base address (falls back to settings).
        timeout: Per-request timeout in seconds (falls back to settings).
        transport: Optional httpx transport, used by tests to stub the server.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self._base_url = (base_url or settings.handy_api_url).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.handy_request_timeout
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        """Execute a request and unwrap the response envelope.

        Args:
            method: HTTP method name ("get", "post").
            path: API endpoint path (e.g. "/api/history").
            **kwargs: Passed through to httpx (json, params, etc.).

        Returns:
            The envelope's ``data`` member (may be None).

        Raises:
            ServiceUnreachableError: On connection, timeout, or network errors.
            ServiceRequestError: On non-2xx status, invalid JSON, or ``ok: false``.
        """
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                resp = await client.request(method.upper(), path, **kwargs)
        except httpx.ConnectError as exc:
            raise ServiceUnreachableError(
                f"Cannot connect to Handy at {self._base_url}: {exc}"
            ) from exc
        except httpx.TimeoutException as exc:
            raise ServiceUnreachableError(
                f"Handy request timed out ({self._base_url}{path})"
            ) from exc
        except httpx.HTTPError as exc:
            raise ServiceUnreachableError(f"Network error: {exc}") from exc

        if not resp.is_success:
            raise ServiceRequestError(
                f"Handy API error: {resp.status_code} {resp.reason_phrase}"
            )

        try:
            envelope = Envelope.model_validate(resp.json())
        except (ValueError, ValidationError) as exc:
            raise ServiceRequestError(
                f"Handy API error: malformed response from {path}"
            ) from exc

        if not envelope.ok:
            raise ServiceRequestError(f"Handy API error: {envelope.error}")
        return envelope.data

    # -- health --

    async def health_check(self) -> HealthStatus:
        """Probe liveness. Any failure is reported as unreachable."""
        try:
            data = await self._request("get", HEALTH_PATH)
            return HealthStatus.model_validate(data or {"status": "unknown"})
        except ServiceUnreachableError:
            raise
        except (DictateError, ValidationError) as exc:
            raise ServiceUnreachableError(str(exc)) from exc

    async def is_reachable(self) -> bool:
        """Return True when the health probe succeeds."""
        try:
            await self.health_check()
            return True
        except ServiceUnreachableError as exc:
            logger.debug("Handy health probe failed: %s", exc.detail)
            return False

    # -- history --

    async def _history_items(self) -> list:
        data = await self._request("get", HISTORY_PATH)
        if not data:
            return []
        if not isinstance(data, list):
            raise ServiceRequestError("Handy API error: history is not a list")
        return data

    @staticmethod
    def _parse_entry(item: Any) -> HistoryEntry:
        try:
            return HistoryEntry.model_validate(item)
        except ValidationError as exc:
            raise ServiceRequestError(
                f"Handy API error: malformed history entry: {exc}"
            ) from exc

    async def list_history(self) -> list[HistoryEntry]:
        """Return the full history, newest entry first."""
        return [self._parse_entry(item) for item in await self._history_items()]

    async def latest_entry(self) -> HistoryEntry | None:
        """Return the newest history entry, or None if there is no history yet.

        Handy lists newest first, so only index 0 is parsed.
        """
        items = await self._history_items()
        return self._parse_entry(items[0]) if items else None

    # -- transcription --

    async def toggle(self, context: str | None = None) -> None:
        """Start recording if idle, stop and transcribe if recording.

        Args:
            context: Optional text forwarded to Handy's post-processing step.
                Only sent when non-empty.
        """
        body = {"context": context} if context else None
        await self._request("post", TOGGLE_PATH, json=body)
