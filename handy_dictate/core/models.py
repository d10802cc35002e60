"""
Pydantic models for the Handy wire format, the host boundary and the bridge API.
"""

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict

# Baseline used when the history is empty at recording start
NO_BASELINE = 0

# ---------------------------------------------------------------------------
# Handy API
# ---------------------------------------------------------------------------


class Envelope(BaseModel):
    """Uniform ``{ok, data, error}`` wrapper around every Handy response."""

    ok: bool
    data: Any = None
    error: str | None = None


class HealthStatus(BaseModel):
    """GET /api/health payload."""

    status: str


class HistoryEntry(BaseModel):
    """One completed transcription from GET /api/history.

    ``post_processed_text`` is filled in later by the service's refinement
    pass; until then it is missing or empty.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: int
    transcription_text: str = ""
    post_processed_text: str | None = None

    @property
    def is_refined(self) -> bool:
        return bool(self.post_processed_text)

    @property
    def text(self) -> str:
        """Refined text when available, raw transcription otherwise."""
        return self.post_processed_text or self.transcription_text


# ---------------------------------------------------------------------------
# Host boundary
# ---------------------------------------------------------------------------


class ToastVariant(StrEnum):
    """Severity of a host notice."""

    info = "info"
    success = "success"
    warning = "warning"
    error = "error"


class CommandResult(StrEnum):
    """Outcome of offering a command event to the plugin."""

    handled = "handled"
    pass_through = "pass_through"


class CommandSpec(BaseModel):
    """Entry in the host's command table."""

    template: str
    description: str


# ---------------------------------------------------------------------------
# Bridge API
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """GET /health response."""

    status: str = "ok"
    version: str
    timestamp: datetime


class StatusResponse(BaseModel):
    """GET /status response."""

    recording: bool
    handy_reachable: bool


class CommandResponse(BaseModel):
    """POST /commands/{name} response."""

    command: str
    result: CommandResult
    recording: bool
