"""
opencode host adapter.

Talks to the opencode server's HTTP API: toasts and prompt insertion go to
the ``/tui`` endpoints, branch and file status come from ``/vcs`` and
``/file/status``.
"""

import logging
from typing import Any

import httpx

from handy_dictate.core.config import get_settings
from handy_dictate.core.exceptions import HostError
from handy_dictate.core.models import ToastVariant
from handy_dictate.services.host.base import BaseHost

logger = logging.getLogger(__name__)


class OpencodeHost(BaseHost):
    """Host adapter for a running opencode server.

    Args:
        base_url: opencode server URL (falls back to settings).
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport, used by tests.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self._base_url = (base_url or settings.opencode_api_url).rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        """Execute a request against opencode and return the decoded JSON body.

        Raises:
            HostError: On any transport error, non-2xx status or invalid JSON.
        """
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                resp = await client.request(method.upper(), path, **kwargs)
                resp.raise_for_status()
                if not resp.content:
                    return None
                return resp.json()
        except httpx.HTTPStatusError as exc:
            raise HostError(
                f"opencode {path} returned {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise HostError(f"opencode {path} failed: {exc}") from exc
        except ValueError as exc:
            raise HostError(f"opencode {path} returned invalid JSON") from exc

    async def show_toast(
        self,
        message: str,
        variant: ToastVariant = ToastVariant.info,
        title: str | None = None,
    ) -> None:
        body: dict = {"message": message, "variant": str(variant)}
        if title:
            body["title"] = title
        await self._request("post", "/tui/show-toast", json=body)

    async def append_prompt(self, text: str) -> None:
        await self._request("post", "/tui/append-prompt", json={"text": text})

    async def current_branch(self) -> str | None:
        data = await self._request("get", "/vcs")
        if isinstance(data, dict):
            return data.get("branch") or None
        return None

    async def modified_files(self) -> list[str]:
        data = await self._request("get", "/file/status")
        if not isinstance(data, list):
            return []
        return [item["path"] for item in data if isinstance(item, dict) and item.get("path")]
