"""Stage timing for per-source execution diagnostics."""

import time
from collections.abc import Iterator
from contextlib import contextmanager


class StageTimer:
    """Collects elapsed milliseconds for named stages of one unit of work.

    Usage:
        timer = StageTimer()
        with timer.stage("fetch"):
            response = await client.post(...)
        timer.durations  # {"fetch": 12}

    A stage that raises is still recorded. Timings are diagnostic only.
    """

    def __init__(self) -> None:
        self._started = time.perf_counter()
        self.durations: dict[str, int] = {}

    @contextmanager
    def stage(self, name: str) -> Iterator[None]:
        start = time.perf_counter()
        try:
            yield
        finally:
            self.durations[name] = int((time.perf_counter() - start) * 1000)

    def get(self, name: str) -> int:
        return self.durations.get(name, 0)

    @property
    def total_ms(self) -> int:
        return int((time.perf_counter() - self._started) * 1000)
