from __future__ import annotations

import threading
from datetime import date, datetime

import pytest

from src.presence_system.presence_system.attendance.model import PresenceSnapshot, PresenceSummary, StatusRecord
from src.presence_system.presence_system.attendance.poller import PresencePoller


def _snapshot(name: str) -> PresenceSnapshot:
    return PresenceSnapshot(
        work_date=date(2026, 2, 2),
        records=(StatusRecord(staff_id=name, full_name=name),),
        summary=PresenceSummary(not_started=1),
        generated_at=datetime(2026, 2, 2, 9, 0),
    )


class ScriptedPresence:
    """Returns (or raises) the queued outcomes in order."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    def load_snapshot(self, work_date=None):
        self.calls += 1
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def test_refresh_now_publishes_snapshot():
    seen = []
    snap = _snapshot("A")
    poller = PresencePoller(ScriptedPresence(snap), on_snapshot=seen.append)

    assert poller.refresh_now() is snap
    assert poller.snapshot is snap
    assert seen == [snap]


def test_stale_result_is_discarded():
    poller = PresencePoller(ScriptedPresence(_snapshot("x")))
    older, newer = poller.next_sequence(), poller.next_sequence()
    fresh, stale = _snapshot("fresh"), _snapshot("stale")

    assert poller.publish(newer, fresh) is True
    assert poller.publish(older, stale) is False
    assert poller.snapshot is fresh


def test_failed_refresh_keeps_previous_snapshot():
    good = _snapshot("A")
    poller = PresencePoller(ScriptedPresence(good, ConnectionError("down")))
    poller.refresh_now()

    with pytest.raises(ConnectionError):
        poller.refresh_now()

    assert poller.snapshot is good
    assert isinstance(poller.last_error, ConnectionError)


def test_successful_refresh_clears_last_error():
    poller = PresencePoller(ScriptedPresence(ConnectionError("down"), _snapshot("A")))

    with pytest.raises(ConnectionError):
        poller.refresh_now()
    poller.refresh_now()

    assert poller.last_error is None


def test_background_tick_reports_errors_without_raising():
    errors = []
    poller = PresencePoller(ScriptedPresence(ConnectionError("down")), on_error=errors.append)

    poller._tick()

    assert len(errors) == 1
    assert poller.snapshot is None


def test_start_runs_first_refresh_immediately():
    published = threading.Event()
    poller = PresencePoller(
        ScriptedPresence(_snapshot("A")),
        interval_seconds=60,
        on_snapshot=lambda snap: published.set(),
    )

    poller.start()
    try:
        assert published.wait(timeout=5)
        assert poller.running
    finally:
        poller.stop(timeout=5)

    assert not poller.running


@pytest.mark.parametrize("interval", [0, -5])
def test_interval_must_be_positive(interval):
    with pytest.raises(ValueError):
        PresencePoller(ScriptedPresence(_snapshot("A")), interval_seconds=interval)
