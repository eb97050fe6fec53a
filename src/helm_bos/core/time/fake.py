"""Fake clock for testing.

FakeTime returns a fixed, advanceable time and records backoff delays instead
of sleeping.
"""

from datetime import UTC, datetime, timedelta

from helm_bos.core.time.abc import Time


class FakeTime(Time):
    """In-memory clock that records sleeps without blocking.

    This class has NO public setup methods. All state is provided via constructor
    or captured during execution.
    """

    def __init__(self, *, current: datetime | None = None) -> None:
        """Create FakeTime.

        Args:
            current: Time returned by now(); each sleep() advances it
        """
        self._current = current or datetime(2024, 1, 15, 10, 0, 0, tzinfo=UTC)
        self._sleep_calls: list[float] = []

    @property
    def sleep_calls(self) -> list[float]:
        """Delays passed to sleep(), in order (for test assertions)."""
        return self._sleep_calls

    def sleep(self, seconds: float) -> None:
        self._sleep_calls.append(seconds)
        self._current += timedelta(seconds=seconds)

    def now(self) -> datetime:
        return self._current
