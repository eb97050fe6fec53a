"""Clock abstraction used for index timestamps and retry backoff.

Injected so tests can control the generated/created timestamps and observe
retry delays without sleeping.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class Time(ABC):
    """Abstract clock for dependency injection."""

    @abstractmethod
    def sleep(self, seconds: float) -> None:
        """Block for a retry backoff delay.

        Args:
            seconds: Delay in seconds
        """
        ...

    @abstractmethod
    def now(self) -> datetime:
        """Get the current time as a timezone-aware UTC datetime."""
        ...
