"""Wall-clock source for crop timestamps (epoch milliseconds)."""

import time
from collections.abc import Callable

Clock = Callable[[], float]


def wall_clock_ms() -> float:
    return time.time() * 1000.0
