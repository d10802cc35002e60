"""
Command and status endpoints.

Thin wrappers over the ``DictatePlugin`` stored on ``app.state``; no
business logic here.
"""

import logging

from fastapi import APIRouter, Request

from handy_dictate.core.models import (
    CommandResponse,
    CommandSpec,
    HistoryEntry,
    StatusResponse,
)
from handy_dictate.plugin import DictatePlugin, register_command

logger = logging.getLogger(__name__)

router = APIRouter(tags=["dictate"])


def _plugin(request: Request) -> DictatePlugin:
    return request.app.state.plugin


@router.get("/commands", response_model=dict[str, CommandSpec])
async def list_commands():
    """Command table entries contributed by this plugin."""
    return register_command({})["command"]


@router.post("/commands/{name}", response_model=CommandResponse)
async def run_command(name: str, request: Request):
    """Offer a host command event to the plugin."""
    plugin = _plugin(request)
    result = await plugin.handle(name)
    return CommandResponse(command=name, result=result, recording=plugin.recording)


@router.get("/status", response_model=StatusResponse)
async def status(request: Request):
    """Recording flag plus a live Handy health probe."""
    plugin = _plugin(request)
    reachable = await plugin.controller.client.is_reachable()
    return StatusResponse(recording=plugin.recording, handy_reachable=reachable)


@router.get("/transcriptions/latest", response_model=HistoryEntry | None)
async def latest_transcription(request: Request):
    """Newest entry in Handy's history, or null when the history is empty."""
    return await _plugin(request).controller.client.latest_entry()
