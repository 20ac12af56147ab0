"""
Wall-clock timing of pipeline stages.

The dict produced by Timer.result() is what Result.timing holds, e.g.
{'total_seconds': 0.002, 'qr_decomposition': 0.0004, 'solve': 0.0001}.
"""

import time
from contextlib import contextmanager
from typing import Iterator


class Timer:
    """
    Measures a whole computation and its named stages.

        timer = Timer()
        timer.start()
        with timer.section('evaluate'):
            ...
        timer.stop()
        timer.result()
    """

    def __init__(self):
        self._stages: dict[str, float] = {}
        self._t0: float | None = None
        self._elapsed: float | None = None

    def start(self) -> None:
        self._t0 = time.perf_counter()

    def stop(self) -> None:
        if self._t0 is None:
            raise RuntimeError("Timer.stop() before start()")
        self._elapsed = time.perf_counter() - self._t0

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        """Add the time spent in the block to stage `name`."""
        t0 = time.perf_counter()
        try:
            yield
        finally:
            self._stages[name] = self._stages.get(name, 0.0) + (time.perf_counter() - t0)

    def result(self) -> dict[str, float]:
        """
        Total and per-stage seconds.

        Raises:
            RuntimeError: If the timer has not been stopped
        """
        if self._elapsed is None:
            raise RuntimeError("Timer.result() before stop()")
        return {'total_seconds': self._elapsed, **self._stages}
