"""Thread-safe counters for the export pipeline."""

import threading
import time


class PipelineMetrics:
    def __init__(self):
        self._lock = threading.Lock()
        self._seen = 0
        self._matched = 0
        self._delivered = 0
        self._failed = 0
        self._start_time = time.monotonic()

    def record_seen(self):
        with self._lock:
            self._seen += 1

    def record_matched(self):
        with self._lock:
            self._matched += 1

    def record_delivery(self, ok: bool):
        with self._lock:
            if ok:
                self._delivered += 1
            else:
                self._failed += 1

    @property
    def delivered(self) -> int:
        with self._lock:
            return self._delivered

    @property
    def failed(self) -> int:
        with self._lock:
            return self._failed

    def snapshot(self) -> dict:
        """Return a point-in-time copy of all counters."""
        with self._lock:
            elapsed = time.monotonic() - self._start_time
            return {
                "snapshots_seen": self._seen,
                "snapshots_matched": self._matched,
                "records_delivered": self._delivered,
                "records_failed": self._failed,
                "elapsed_seconds": round(elapsed, 2),
            }
