"""
Clock -- Deterministic time abstraction.

Responsibility:
    Provides an injectable clock interface so that engine code never calls
    ``datetime.now()`` directly.  Every "is this campaign expired?" answer
    is a function of an explicit instant.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O (except SystemClock,
    which is the one sanctioned I/O boundary for time).

Failure modes:
    - DeterministicClock rejects naive datetimes with ValueError.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone


class Clock(ABC):
    """
    Abstract clock interface.

    Contract:
        Schedulers and request handlers hold a Clock and pass ``now()`` into
        the engines.  Engines themselves never read the wall clock.

    Guarantees:
        ``now()`` returns a timezone-aware ``datetime``.
    """

    @abstractmethod
    def now(self) -> datetime:
        """Get the current time."""
        ...


class SystemClock(Clock):
    """Production clock returning the actual UTC system time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """
    Test clock with controlled time.

    Guarantees:
        - ``now()`` returns the same value on repeated calls until
          ``advance()`` or ``set_time()`` is called.
    """

    def __init__(self, fixed_time: datetime | None = None):
        """
        Initialize with optional fixed time.

        Args:
            fixed_time: If provided, clock always returns this time.
                       If None, uses a default epoch time.
        """
        fixed_time = fixed_time or datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
        _require_aware(fixed_time)
        self._fixed_time = fixed_time
        self._offset = timedelta(0)

    def now(self) -> datetime:
        return self._fixed_time + self._offset

    def set_time(self, time: datetime) -> None:
        """Set the clock to a specific time."""
        _require_aware(time)
        self._fixed_time = time
        self._offset = timedelta(0)

    def advance(self, delta: timedelta | int = 1) -> datetime:
        """Advance the clock by a timedelta (or a number of seconds)."""
        if not isinstance(delta, timedelta):
            delta = timedelta(seconds=delta)
        self._offset += delta
        return self.now()


def _require_aware(value: datetime) -> None:
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError(f"Clock time must be timezone-aware, got {value!r}")
