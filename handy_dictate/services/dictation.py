"""Toggle state machine behind the ``dictate`` command.

One ``DictationController`` owns the recording flag and the baseline history
id. Each trigger either starts a Handy recording or stops it and waits for
the transcription, then reports the outcome through host notices. A trigger
never raises: every failure becomes one error notice.

Usage::

    controller = DictationController(client, host)
    await controller.toggle()  # starts recording
    await controller.toggle()  # stops, transcribes, appends to prompt
"""

import logging
from dataclasses import dataclass

from handy_dictate.core.config import get_settings
from handy_dictate.core.models import NO_BASELINE, ToastVariant
from handy_dictate.services.context import gather_context
from handy_dictate.services.handy.client import HandyClient
from handy_dictate.services.handy.poller import HistoryPoller
from handy_dictate.services.host.base import BaseHost

logger = logging.getLogger(__name__)


@dataclass
class SessionState:
    """In-memory recording state; lives for the process lifetime only."""

    recording: bool = False
    baseline_id: int = NO_BASELINE


def _describe(exc: Exception) -> str:
    return getattr(exc, "detail", None) or str(exc) or type(exc).__name__


class DictationController:
    """Starts and stops Handy recordings on alternate triggers.

    Args:
        client: Handy API client.
        host: Host adapter used for notices, prompt insertion and context.
        poller: History poller (built from ``client`` if omitted).
        transcribe_timeout: Seconds to wait for the transcription to appear.
        notify_partial_result: Warn when post-processing did not finish and
            raw text was inserted instead.
        title: Title shown on every notice.
    """

    def __init__(
        self,
        client: HandyClient,
        host: BaseHost,
        poller: HistoryPoller | None = None,
        transcribe_timeout: float | None = None,
        notify_partial_result: bool | None = None,
        title: str | None = None,
    ) -> None:
        settings = get_settings()
        self._client = client
        self._host = host
        self._poller = poller or HistoryPoller(client)
        self._timeout = (
            transcribe_timeout if transcribe_timeout is not None else settings.transcribe_timeout
        )
        self._notify_partial = (
            notify_partial_result
            if notify_partial_result is not None
            else settings.notify_partial_result
        )
        self._title = title or settings.notice_title
        self._state = SessionState()

    @property
    def client(self) -> HandyClient:
        return self._client

    @property
    def recording(self) -> bool:
        return self._state.recording

    @property
    def baseline_id(self) -> int:
        return self._state.baseline_id

    async def toggle(self) -> None:
        """Handle one trigger: start when idle, stop when recording."""
        if self._state.recording:
            await self.on_trigger_while_recording()
        else:
            await self.on_trigger_while_idle()

    async def _notify(self, message: str, variant: ToastVariant = ToastVariant.info) -> None:
        """Show a notice; host failures are logged and dropped."""
        try:
            await self._host.show_toast(message, variant, self._title)
        except Exception:
            logger.warning("Failed to deliver %s notice: %s", variant, message)

    # -- Idle -> Recording --

    async def on_trigger_while_idle(self) -> None:
        """Probe Handy, snapshot the newest history id and start recording."""
        try:
            await self._client.health_check()
        except Exception as exc:
            logger.warning("Handy health probe failed: %s", _describe(exc))
            await self._notify(
                f"Cannot reach Handy at {self._client.base_url}\n"
                "Make sure Handy is running with API enabled",
                ToastVariant.error,
            )
            return

        try:
            latest = await self._client.latest_entry()
            baseline = latest.id if latest is not None else NO_BASELINE
            await self._client.toggle()
        except Exception as exc:
            logger.exception("Failed to start recording")
            await self._notify(f"Failed to start recording: {_describe(exc)}", ToastVariant.error)
            return

        self._state.baseline_id = baseline
        self._state.recording = True
        logger.info("Recording started (baseline entry %s)", baseline)
        await self._notify("Recording... run /dictate again to stop")

    # -- Recording -> Idle --

    async def on_trigger_while_recording(self) -> None:
        """Stop recording, wait for the transcription and append it to the prompt.

        A failed stop call keeps the state at recording so the next trigger
        retries the stop.
        """
        await self._notify("Stopping recording...")

        try:
            context = await gather_context(self._host)
            await self._client.toggle(context or None)
        except Exception as exc:
            logger.exception("Failed to stop recording")
            await self._notify(f"Failed to stop recording: {_describe(exc)}", ToastVariant.error)
            return

        self._state.recording = False
        logger.info("Recording stopped; waiting for transcription")
        await self._notify("Transcribing...")

        try:
            entry = await self._poller.await_new_entry(self._state.baseline_id, self._timeout)
            await self._host.append_prompt(entry.text)
        except Exception as exc:
            logger.warning("Transcription failed: %s", _describe(exc))
            await self._notify(f"Transcription failed: {_describe(exc)}", ToastVariant.error)
            return

        if not entry.is_refined and self._notify_partial:
            await self._notify(
                "Post-processing did not finish; inserted raw transcription",
                ToastVariant.warning,
            )
        await self._notify("Transcription added to prompt", ToastVariant.success)
