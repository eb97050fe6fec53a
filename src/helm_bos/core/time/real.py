"""Real time implementation using the system clock."""

import time
from datetime import UTC, datetime

from helm_bos.core.time.abc import Time


class RealTime(Time):
    """Production clock: wall-clock UTC time and real sleeps."""

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)

    def now(self) -> datetime:
        return datetime.now(UTC)
