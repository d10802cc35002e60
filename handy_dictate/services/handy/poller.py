"""History poller: wait for a new transcription to land in Handy's history.

Handy publishes a bare entry as soon as transcription finishes and fills in
``post_processed_text`` later. The poller returns the first usable result:
it waits at most ``transcribe_timeout`` for a new entry, then at most
``post_process_wait`` more for its refinement, falling back to the raw text.
The two deadlines are independent.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from handy_dictate.core.config import get_settings
from handy_dictate.core.exceptions import PollTimeoutError
from handy_dictate.core.models import HistoryEntry
from handy_dictate.services.handy.client import HandyClient

logger = logging.getLogger(__name__)


class HistoryPoller:
    """Polls ``HandyClient.latest_entry()`` until a new entry shows up.

    Args:
        client: Handy API client.
        poll_interval: Seconds to sleep between fetches.
        post_process_wait: Seconds to wait for refinement after the raw
            entry is detected.
        clock: Monotonic time source in seconds.
        sleep: Awaitable sleep function.
    """

    def __init__(
        self,
        client: HandyClient,
        poll_interval: float | None = None,
        post_process_wait: float | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        settings = get_settings()
        self._client = client
        self._interval = poll_interval if poll_interval is not None else settings.poll_interval
        self._post_process_wait = (
            post_process_wait if post_process_wait is not None else settings.post_process_wait
        )
        self._clock = clock
        self._sleep = sleep

    async def await_new_entry(self, baseline: int, timeout: float) -> HistoryEntry:
        """Block until an entry other than ``baseline`` with raw text appears.

        Args:
            baseline: Id of the newest entry before recording started.
            timeout: Seconds to wait for the new entry.

        Returns:
            The new entry, refined if refinement finished in time.

        Raises:
            PollTimeoutError: If no qualifying entry appears before the deadline.
            DictateError: Propagated from the client on request failures.
        """
        deadline = self._clock() + timeout
        while self._clock() < deadline:
            entry = await self._client.latest_entry()
            logger.debug(
                "Polled history: latest=%s baseline=%s",
                entry.id if entry is not None else None,
                baseline,
            )
            if entry is not None and entry.id != baseline and entry.transcription_text:
                logger.info("New history entry %s detected (baseline %s)", entry.id, baseline)
                if entry.is_refined:
                    return entry
                return await self._await_refinement(entry)
            await self._sleep(self._interval)

        raise PollTimeoutError(
            f"Timed out waiting for transcription after {timeout:g}s"
        )

    async def _await_refinement(self, entry: HistoryEntry) -> HistoryEntry:
        """Re-fetch ``entry`` until it carries post-processed text or time runs out."""
        deadline = self._clock() + self._post_process_wait
        while self._clock() < deadline:
            await self._sleep(self._interval)
            updated = await self._client.latest_entry()
            logger.debug(
                "Waiting for refinement of entry %s: latest=%s refined=%s",
                entry.id,
                updated.id if updated is not None else None,
                updated.is_refined if updated is not None else False,
            )
            if updated is not None and updated.id == entry.id and updated.is_refined:
                logger.info("Entry %s refined by post-processing", entry.id)
                return updated

        logger.warning(
            "Post-processing for entry %s did not finish within %ss; using raw text",
            entry.id,
            self._post_process_wait,
        )
        return entry
