"""
Scan scheduler.

Runs WatchFolderEngine.scan_all_folders() on a fixed interval in a single
background thread. Ticks never overlap: the next wait only starts once the
previous scan has returned.
"""

import logging
import threading
from typing import Optional

logger = logging.getLogger(__name__)


class ScanScheduler:
    """
    Periodic driver for watch folder scans.

    Args:
        engine: WatchFolderEngine to tick
        interval_seconds: Delay between the end of one scan and the next
    """

    def __init__(self, engine, interval_seconds: float = 10.0):
        self.engine = engine
        self.interval_seconds = interval_seconds
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._tick_count = 0

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def tick_count(self) -> int:
        return self._tick_count

    def run_once(self) -> None:
        """Run a single tick in the calling thread."""
        try:
            self.engine.scan_all_folders()
        except Exception as e:
            logger.error(f"[ScanScheduler] Scan tick failed: {e}", exc_info=True)
        self._tick_count += 1

    def start(self) -> None:
        """Start the background scan loop (no-op if already running)."""
        if self.is_running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._loop, name="scan-scheduler", daemon=True
        )
        self._thread.start()
        logger.info(f"[ScanScheduler] Started, interval {self.interval_seconds}s")

    def stop(self, timeout: Optional[float] = None) -> None:
        """Stop the loop and wait for the current tick to finish."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None
        logger.info("[ScanScheduler] Stopped")

    def _loop(self) -> None:
        while not self._stop_event.is_set():
            self.run_once()
            self._stop_event.wait(self.interval_seconds)
