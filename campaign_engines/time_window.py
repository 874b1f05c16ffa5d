"""
campaign_engines.time_window -- Campaign expiration arithmetic.

Responsibility:
    Compute when a campaign expires from its online date and day count,
    and answer the time-based predicates built on it: expired, expiring
    (near-deadline notifications) and recent ("new campaigns" listings).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import campaign_kernel.domain.
    Consumed by the lifecycle engine and the collection scopes.

Invariants enforced:
    - Purity: ``now`` is always an explicit argument; no clock access.
    - Expiration is rounded up to the last instant of its calendar day in
      the configured time zone, so a project scheduled for N days stays
      live through the whole of its last day whatever hour it went online.
    - No online date means "not applicable": expires_at is None and every
      predicate is False.
    - Calendar arithmetic (which day a window closes on) happens in the
      configured zone; elapsed-time comparisons happen on UTC instants,
      so a DST change inside a window never shifts them by an hour.

Failure modes:
    - None.  Negative ``online_days`` is valid (force-closed projects).
      A closing day outside the representable date range clamps to
      ``FAR_FUTURE`` / ``FAR_PAST`` instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta, timezone, tzinfo

from campaign_kernel.domain.entities import Project
from campaign_kernel.domain.settings import DEFAULT_SETTINGS, EngineSettings

FAR_FUTURE = datetime.max.replace(tzinfo=timezone.utc)
FAR_PAST = datetime.min.replace(tzinfo=timezone.utc)


def localize(instant: datetime, tz: tzinfo) -> datetime:
    """Express an instant in ``tz``; naive datetimes are taken to be in ``tz``."""
    if instant.tzinfo is None or instant.utcoffset() is None:
        return instant.replace(tzinfo=tz)
    return instant.astimezone(tz)


def to_utc(instant: datetime, tz: tzinfo) -> datetime:
    """
    The UTC instant of ``instant`` (naive values read in ``tz``).

    Values at the edge of the date range whose UTC form is not
    representable clamp to ``FAR_FUTURE`` / ``FAR_PAST``.
    """
    try:
        return localize(instant, tz).astimezone(timezone.utc)
    except OverflowError:
        return FAR_FUTURE if instant.year > 1 else FAR_PAST


def end_of_day(instant: datetime, tz: tzinfo) -> datetime:
    """Last representable instant of ``instant``'s calendar day in ``tz``."""
    local = localize(instant, tz)
    return datetime.combine(local.date(), time.max, tzinfo=tz)


@dataclass(frozen=True)
class TimeWindow:
    """
    Fundraising window of one project.

    Contract:
        Built from the project's ``online_date``/``online_days`` and the
        engine settings.  All predicates take ``now`` explicitly.
    """

    online_date: datetime | None
    online_days: int
    settings: EngineSettings = DEFAULT_SETTINGS

    @classmethod
    def for_project(
        cls, project: Project, settings: EngineSettings = DEFAULT_SETTINGS
    ) -> TimeWindow:
        return cls(project.online_date, project.online_days, settings)

    @property
    def expires_at(self) -> datetime | None:
        """
        ``end_of_day(online_date + online_days)``, or None when unscheduled.

        Days are added on the local calendar so a DST change inside the
        window does not shift the closing day.
        """
        if self.online_date is None:
            return None
        tz = self.settings.tzinfo
        opening_day = localize(self.online_date, tz).date()
        try:
            closing_day = opening_day + timedelta(days=self.online_days)
        except OverflowError:
            return FAR_FUTURE if self.online_days > 0 else FAR_PAST
        return datetime.combine(closing_day, time.max, tzinfo=tz)

    def is_expired(self, now: datetime) -> bool:
        expires_at = self.expires_at
        return expires_at is not None and self._utc(expires_at) < self._utc(now)

    def is_expiring(self, now: datetime) -> bool:
        """Still open, but closing within ``settings.expiring_window``."""
        expires_at = self.expires_at
        if expires_at is None:
            return False
        expires_at = self._utc(expires_at)
        now = self._utc(now)
        if expires_at < now:
            return False
        return expires_at - now <= self.settings.expiring_window

    def is_recent(self, now: datetime) -> bool:
        """Went online within the trailing ``settings.recent_window``."""
        if self.online_date is None:
            return False
        age = self._utc(now) - self._utc(self.online_date)
        return timedelta(0) <= age <= self.settings.recent_window

    def is_scheduled_in_future(self, now: datetime) -> bool:
        if self.online_date is None:
            return False
        return self._utc(self.online_date) > self._utc(now)

    def _utc(self, instant: datetime) -> datetime:
        return to_utc(instant, self.settings.tzinfo)
