"""Unit tests for HistoryPoller.

All timing runs on ``FakeClock`` so the overall and post-processing
deadlines can be checked exactly without real sleeps.
"""

import logging

import pytest

from handy_dictate.core.exceptions import PollTimeoutError, ServiceUnreachableError
from handy_dictate.services.handy.poller import HistoryPoller


class TestDetection:
    async def test_returns_refined_entry_immediately(self, poller, handy, clock, make_entry):
        handy.set_history([make_entry(6, "hello", "Hello.")], at=0.0)

        entry = await poller.await_new_entry(baseline=5, timeout=30.0)

        assert entry.id == 6
        assert entry.post_processed_text == "Hello."
        assert clock.sleeps == []

    async def test_waits_for_entry_after_baseline(self, poller, handy, clock, make_entry):
        handy.set_history([make_entry(5, "old", "Old.")], at=0.0)
        handy.set_history([make_entry(6, "new", "New."), make_entry(5, "old", "Old.")], at=3.0)

        entry = await poller.await_new_entry(baseline=5, timeout=30.0)

        assert entry.id == 6
        assert 3.0 <= clock.now < 3.0 + 0.3 + 1e-9

    async def test_ignores_entry_without_raw_text(self, poller, handy, clock, make_entry):
        handy.set_history([make_entry(6, "", None)], at=0.0)
        handy.set_history([make_entry(6, "hello", "Hello.")], at=1.0)

        entry = await poller.await_new_entry(baseline=5, timeout=30.0)

        assert entry.text == "Hello."
        assert clock.now >= 1.0

    async def test_empty_history_counts_as_no_entry(self, poller, handy, clock, make_entry):
        handy.set_history([make_entry(1, "first", "First.")], at=2.0)

        entry = await poller.await_new_entry(baseline=0, timeout=30.0)

        assert entry.id == 1


class TestOverallTimeout:
    async def test_times_out_when_only_baseline_present(self, poller, handy, clock, make_entry):
        handy.set_history([make_entry(5, "old", "Old.")], at=0.0)

        with pytest.raises(PollTimeoutError):
            await poller.await_new_entry(baseline=5, timeout=30.0)

        assert clock.now >= 30.0
        # Never sleeps past the deadline by more than one interval
        assert clock.now < 30.0 + 0.3 + 1e-9

    async def test_does_not_fail_before_deadline(self, handy_client, handy, clock, make_entry):
        """An entry arriving just before the deadline is still detected."""
        handy.set_history([make_entry(5, "old")], at=0.0)
        handy.set_history([make_entry(6, "late", "Late.")], at=9.0)
        poller = HistoryPoller(
            handy_client, poll_interval=1.0, post_process_wait=5.0, clock=clock, sleep=clock.sleep
        )

        entry = await poller.await_new_entry(baseline=5, timeout=9.5)

        assert entry.id == 6

    async def test_zero_timeout_fails_without_fetching(self, poller, handy):
        with pytest.raises(PollTimeoutError):
            await poller.await_new_entry(baseline=5, timeout=0.0)

        assert handy.requests == []

    async def test_client_errors_propagate(self, clock):
        class BrokenClient:
            async def latest_entry(self):
                raise ServiceUnreachableError("down")

        poller = HistoryPoller(
            BrokenClient(), poll_interval=0.3, post_process_wait=1.0, clock=clock, sleep=clock.sleep
        )

        with pytest.raises(ServiceUnreachableError):
            await poller.await_new_entry(baseline=0, timeout=5.0)


class TestRefinementWait:
    async def test_returns_refinement_that_arrives_later(self, poller, handy, clock, make_entry):
        handy.set_history([make_entry(6, "hello")], at=0.0)
        handy.set_history([make_entry(6, "hello", "Hello.")], at=2.0)

        entry = await poller.await_new_entry(baseline=5, timeout=30.0)

        assert entry.id == 6
        assert entry.post_processed_text == "Hello."
        assert 2.0 <= clock.now < 2.3 + 1e-9

    async def test_falls_back_to_raw_text(self, poller, handy, clock, make_entry):
        handy.set_history([make_entry(6, "hello")], at=0.0)

        entry = await poller.await_new_entry(baseline=5, timeout=30.0)

        assert entry.id == 6
        assert entry.post_processed_text is None
        assert entry.text == "hello"
        assert clock.now >= 15.0

    async def test_refinement_window_is_independent_of_overall_timeout(
        self, handy_client, handy, clock, make_entry
    ):
        """Detection at t=9 of a 10s timeout still gets the full refinement window."""
        handy.set_history([make_entry(6, "hello")], at=9.0)
        handy.set_history([make_entry(6, "hello", "Hello.")], at=20.0)
        poller = HistoryPoller(
            handy_client, poll_interval=0.5, post_process_wait=15.0, clock=clock, sleep=clock.sleep
        )

        entry = await poller.await_new_entry(baseline=5, timeout=10.0)

        assert entry.post_processed_text == "Hello."
        assert clock.now >= 20.0

    async def test_refinement_of_different_entry_is_ignored(
        self, poller, handy, clock, make_entry
    ):
        handy.set_history([make_entry(6, "hello")], at=0.0)
        handy.set_history([make_entry(7, "other", "Other."), make_entry(6, "hello")], at=1.0)

        entry = await poller.await_new_entry(baseline=5, timeout=30.0)

        assert entry.id == 6
        assert entry.text == "hello"
        assert clock.now >= 15.0

    async def test_refinement_fetch_error_propagates(self, clock, make_entry):
        from handy_dictate.core.models import HistoryEntry

        calls = []

        class FlakyClient:
            async def latest_entry(self):
                calls.append(1)
                if len(calls) == 1:
                    return HistoryEntry.model_validate(make_entry(6, "hello"))
                raise ServiceUnreachableError("gone")

        poller = HistoryPoller(
            FlakyClient(), poll_interval=0.3, post_process_wait=5.0, clock=clock, sleep=clock.sleep
        )

        with pytest.raises(ServiceUnreachableError):
            await poller.await_new_entry(baseline=5, timeout=30.0)


class TestLogging:
    async def test_each_iteration_logged_at_debug(self, poller, handy, clock, make_entry, caplog):
        caplog.set_level(logging.DEBUG, logger="handy_dictate.services.handy.poller")
        handy.set_history([make_entry(5, "old")], at=0.0)
        handy.set_history([make_entry(6, "hello"), make_entry(5, "old")], at=0.6)
        handy.set_history([make_entry(6, "hello", "Hello."), make_entry(5, "old")], at=1.5)

        await poller.await_new_entry(baseline=5, timeout=30.0)

        polled = [r for r in caplog.records if r.getMessage().startswith("Polled history")]
        refining = [r for r in caplog.records if r.getMessage().startswith("Waiting for refinement")]
        assert len(polled) == 3
        assert polled[0].getMessage() == "Polled history: latest=5 baseline=5"
        assert len(refining) >= 1
        assert refining[-1].getMessage().endswith("latest=6 refined=True")
        assert all(r.levelno == logging.DEBUG for r in polled + refining)
