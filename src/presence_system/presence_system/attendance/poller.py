from __future__ import annotations

import itertools
import threading
from datetime import date
from typing import Callable, Optional

from ..common.logging import get_logger
from ..core.constants import DEFAULT_REFRESH_INTERVAL_SECONDS
from .model import PresenceSnapshot
from .service import PresenceService

logger = get_logger(__name__)


class PresencePoller:
    """Re-runs fetch + reconcile on a fixed interval and on demand.

    Every run draws a sequence number. A run that finishes after a newer one
    has already been published is discarded, so the published snapshot never
    goes backwards when refreshes overlap.
    """

    def __init__(
        self,
        presence: PresenceService,
        *,
        interval_seconds: float = DEFAULT_REFRESH_INTERVAL_SECONDS,
        on_snapshot: Optional[Callable[[PresenceSnapshot], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")

        self._presence = presence
        self._interval = float(interval_seconds)
        self._on_snapshot = on_snapshot
        self._on_error = on_error

        self._lock = threading.Lock()
        self._sequence = itertools.count(1)
        self._published_seq = 0
        self._snapshot: Optional[PresenceSnapshot] = None
        self._last_error: Optional[Exception] = None

        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def snapshot(self) -> Optional[PresenceSnapshot]:
        with self._lock:
            return self._snapshot

    @property
    def last_error(self) -> Optional[Exception]:
        with self._lock:
            return self._last_error

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def next_sequence(self) -> int:
        with self._lock:
            return next(self._sequence)

    def publish(self, seq: int, snapshot: PresenceSnapshot) -> bool:
        """Publish a snapshot unless a newer run already did. Returns True if published."""

        with self._lock:
            if seq < self._published_seq:
                logger.debug("Discarding stale presence snapshot seq=%d (published=%d)", seq, self._published_seq)
                return False
            self._published_seq = seq
            self._snapshot = snapshot
            self._last_error = None

        if self._on_snapshot:
            self._on_snapshot(snapshot)
        return True

    def refresh_now(self, work_date: Optional[date] = None) -> PresenceSnapshot:
        """Fetch and reconcile immediately.

        Returns the fresh snapshot even if it lost the race to a newer one.
        Accessor errors are recorded as `last_error` and re-raised.
        """

        seq = self.next_sequence()
        try:
            snapshot = self._presence.load_snapshot(work_date)
        except Exception as exc:
            with self._lock:
                if seq >= self._published_seq:
                    self._last_error = exc
            raise

        self.publish(seq, snapshot)
        return snapshot

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="presence-poller", daemon=True)
        self._thread.start()
        logger.info("Presence poller started (every %.0fs)", self._interval)

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("Presence poller stopped")

    def _run(self) -> None:
        while not self._stop.is_set():
            self._tick()
            self._stop.wait(self._interval)

    def _tick(self) -> None:
        try:
            self.refresh_now()
        except Exception as exc:
            # Keep polling; the previous snapshot stays published and the UI can offer retry.
            logger.error("Presence refresh failed: %s", exc, exc_info=True)
            if self._on_error:
                self._on_error(exc)
