"""Shared pytest fixtures for the handy-dictate test suite.

Provides a fake clock for the poller, an in-memory Handy API served through
``httpx.MockTransport``, and a host double that records notices and
prompt insertions.
"""

import json

import httpx
import pytest

from handy_dictate.core.models import ToastVariant
from handy_dictate.services.handy.client import HandyClient
from handy_dictate.services.handy.poller import HistoryPoller
from handy_dictate.services.host.base import BaseHost

# ---------------------------------------------------------------------------
# Time
# ---------------------------------------------------------------------------


class FakeClock:
    """Monotonic clock that only moves when ``sleep`` is awaited."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


# ---------------------------------------------------------------------------
# Handy API double
# ---------------------------------------------------------------------------


def entry(id: int, text: str = "hello", refined: str | None = None) -> dict:
    """Build a history entry in Handy's wire format."""
    data = {"id": id, "transcription_text": text}
    if refined is not None:
        data["post_processed_text"] = refined
    return data


class FakeHandy:
    """In-memory Handy API.

    ``timeline`` holds ``(time, history)`` snapshots; GET /api/history
    returns the last snapshot whose time is not after the clock. The toggle
    endpoint flips ``recording`` and records the request body.
    """

    def __init__(self, clock: FakeClock) -> None:
        self.clock = clock
        self.timeline: list[tuple[float, list[dict]]] = [(0.0, [])]
        self.healthy = True
        self.toggle_ok = True
        self.toggle_error = "already busy"
        self.recording = False
        self.toggle_bodies: list[dict | None] = []
        self.requests: list[tuple[str, str]] = []

    def set_history(self, history: list[dict], at: float | None = None) -> None:
        at = self.clock.now if at is None else at
        self.timeline.append((at, history))
        self.timeline.sort(key=lambda item: item[0])

    def history(self) -> list[dict]:
        current: list[dict] = []
        for at, snapshot in self.timeline:
            if at <= self.clock.now:
                current = snapshot
        return current

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append((request.method, request.url.path))
        path = request.url.path
        if path == "/api/health":
            if not self.healthy:
                return httpx.Response(503, json={"ok": False, "error": "down"})
            return httpx.Response(200, json={"ok": True, "data": {"status": "ok"}})
        if path == "/api/history":
            return httpx.Response(200, json={"ok": True, "data": self.history()})
        if path == "/api/transcription/toggle-post-process":
            body = json.loads(request.content) if request.content else None
            self.toggle_bodies.append(body)
            if not self.toggle_ok:
                return httpx.Response(200, json={"ok": False, "error": self.toggle_error})
            self.recording = not self.recording
            return httpx.Response(200, json={"ok": True})
        return httpx.Response(404, json={"ok": False, "error": "not found"})

    @property
    def toggle_calls(self) -> int:
        return sum(1 for _, path in self.requests if path.endswith("toggle-post-process"))


@pytest.fixture
def handy(clock):
    return FakeHandy(clock)


@pytest.fixture
def handy_client(handy):
    return HandyClient(
        base_url="http://handy.test",
        timeout=1.0,
        transport=httpx.MockTransport(handy.handler),
    )


@pytest.fixture
def poller(handy_client, clock):
    return HistoryPoller(
        handy_client,
        poll_interval=0.3,
        post_process_wait=15.0,
        clock=clock,
        sleep=clock.sleep,
    )


# ---------------------------------------------------------------------------
# Host double
# ---------------------------------------------------------------------------


class RecordingHost(BaseHost):
    """Host that records every call; lookups can be told to fail."""

    def __init__(self) -> None:
        self.toasts: list[tuple[str, ToastVariant, str | None]] = []
        self.prompt: list[str] = []
        self.branch: str | None = "main"
        self.files: list[str] = []
        self.branch_error: Exception | None = None
        self.files_error: Exception | None = None
        self.toast_error: Exception | None = None
        self.append_error: Exception | None = None

    async def show_toast(self, message, variant=ToastVariant.info, title=None):
        if self.toast_error is not None:
            raise self.toast_error
        self.toasts.append((message, variant, title))

    async def append_prompt(self, text):
        if self.append_error is not None:
            raise self.append_error
        self.prompt.append(text)

    async def current_branch(self):
        if self.branch_error is not None:
            raise self.branch_error
        return self.branch

    async def modified_files(self):
        if self.files_error is not None:
            raise self.files_error
        return list(self.files)

    def variants(self) -> list[ToastVariant]:
        return [variant for _, variant, _ in self.toasts]

    def messages(self) -> list[str]:
        return [message for message, _, _ in self.toasts]


@pytest.fixture
def host():
    return RecordingHost()


@pytest.fixture
def make_entry():
    """Factory for Handy wire-format history entries."""
    return entry
