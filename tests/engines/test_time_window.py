"""
Tests for the TimeWindow engine.

Covers:
- expires_at rounding to end of day, with and without an online date
- expired / expiring / recent predicates
- Negative, zero and out-of-range online_days
- Non-UTC time zones and DST changes inside a window
"""

from datetime import datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from campaign_kernel.domain.settings import EngineSettings
from campaign_engines.time_window import (
    FAR_FUTURE,
    FAR_PAST,
    TimeWindow,
    end_of_day,
    localize,
    to_utc,
)

UTC = timezone.utc
NOW = datetime(2024, 1, 15, 12, 0, 0, tzinfo=UTC)
END_OF_TODAY = datetime(2024, 1, 15, 23, 59, 59, 999999, tzinfo=UTC)
NEW_YORK = EngineSettings(time_zone="America/New_York")


class TestEndOfDay:
    def test_rounds_up_to_last_instant(self):
        assert end_of_day(NOW, UTC) == END_OF_TODAY

    def test_uses_local_calendar_day(self):
        """01:00 UTC on the 16th is still the 15th in Sao Paulo (UTC-3)."""
        sao_paulo = ZoneInfo("America/Sao_Paulo")
        instant = datetime(2024, 1, 16, 1, 0, tzinfo=UTC)
        result = end_of_day(instant, sao_paulo)
        assert result.date() == datetime(2024, 1, 15).date()
        assert result.time() == time.max

    def test_naive_datetime_taken_in_zone(self):
        naive = datetime(2024, 1, 15, 8, 30)
        assert localize(naive, UTC) == datetime(2024, 1, 15, 8, 30, tzinfo=UTC)


class TestToUtc:
    def test_naive_read_in_zone(self):
        """Naive 07:00 in New York (EST) is 12:00 UTC."""
        result = to_utc(datetime(2024, 1, 15, 7, 0), NEW_YORK.tzinfo)
        assert result == NOW
        assert result.tzinfo is UTC

    def test_unrepresentable_instant_clamps(self):
        """The last instant of date.max in New York is past datetime.max in UTC."""
        last = datetime.max.replace(tzinfo=NEW_YORK.tzinfo)
        assert to_utc(last, NEW_YORK.tzinfo) == FAR_FUTURE


class TestExpiresAt:
    def test_none_without_online_date(self):
        assert TimeWindow(None, 0).expires_at is None

    def test_zero_days_expires_end_of_go_live_day(self):
        assert TimeWindow(NOW, 0).expires_at == END_OF_TODAY

    def test_hour_of_go_live_does_not_matter(self):
        early = TimeWindow(datetime(2024, 1, 15, 0, 5, tzinfo=UTC), 3)
        late = TimeWindow(datetime(2024, 1, 15, 23, 55, tzinfo=UTC), 3)
        assert early.expires_at == late.expires_at == END_OF_TODAY + timedelta(days=3)

    def test_negative_days_is_before_go_live(self):
        assert TimeWindow(NOW, -1).expires_at == END_OF_TODAY - timedelta(days=1)

    def test_configured_time_zone(self):
        """End of day in Sao Paulo is later in absolute terms than in UTC."""
        settings = EngineSettings(time_zone="America/Sao_Paulo")
        window = TimeWindow(NOW, 0, settings)
        expected = datetime(2024, 1, 15, 23, 59, 59, 999999, tzinfo=ZoneInfo("America/Sao_Paulo"))
        assert window.expires_at == expected
        assert window.expires_at > END_OF_TODAY

    def test_closing_day_counted_on_local_calendar_across_dst(self):
        """Spring-forward on 2024-03-10 does not move the closing day."""
        window = TimeWindow(datetime(2024, 3, 8, 17, 0, tzinfo=UTC), 3, NEW_YORK)
        assert window.expires_at == datetime(2024, 3, 11, 23, 59, 59, 999999, tzinfo=NEW_YORK.tzinfo)


class TestOutOfRangeDays:
    def test_huge_positive_days_clamp_to_far_future(self):
        window = TimeWindow(NOW, 4_000_000)
        assert window.expires_at == FAR_FUTURE
        assert window.is_expired(NOW) is False
        assert window.is_expiring(NOW) is False

    def test_huge_negative_days_clamp_to_far_past(self):
        window = TimeWindow(NOW, -4_000_000)
        assert window.expires_at == FAR_PAST
        assert window.is_expired(NOW) is True
        assert window.is_expiring(NOW) is False

    def test_last_representable_day_in_negative_offset_zone(self):
        """Closing on 9999-12-31 in New York has no UTC form; it reads as far future."""
        window = TimeWindow(datetime(9999, 12, 19, 17, 0, tzinfo=UTC), 12, NEW_YORK)
        assert window.is_expired(NOW) is False


class TestExpired:
    def test_false_without_online_date(self):
        for days in (-10, 0, 10):
            assert TimeWindow(None, days).is_expired(NOW) is False

    def test_false_when_expires_in_future(self):
        assert TimeWindow(NOW + timedelta(days=2), 0).is_expired(NOW) is False

    def test_true_when_expired_in_past(self):
        assert TimeWindow(NOW - timedelta(days=2), 0).is_expired(NOW) is True

    def test_zero_days_expires_only_after_end_of_day(self):
        window = TimeWindow(NOW, 0)
        assert window.is_expired(END_OF_TODAY) is False
        assert window.is_expired(END_OF_TODAY + timedelta(microseconds=1)) is True

    def test_negative_days_already_expired(self):
        assert TimeWindow(NOW, -1).is_expired(NOW) is True


class TestExpiring:
    @pytest.mark.parametrize("days, expected", [(13, True), (0, True), (15, False), (-1, False)])
    def test_lookahead_window(self, days, expected):
        assert TimeWindow(NOW, days).is_expiring(NOW) is expected

    def test_false_without_online_date(self):
        assert TimeWindow(None, 1).is_expiring(NOW) is False

    def test_custom_window(self):
        settings = EngineSettings(expiring_window=timedelta(days=3))
        assert TimeWindow(NOW, 2, settings).is_expiring(NOW) is True
        assert TimeWindow(NOW, 4, settings).is_expiring(NOW) is False

    def test_lookahead_measured_in_elapsed_time_across_dst(self):
        """
        Closing 2024-03-12 23:59:59 EDT is 6d23h30m of real time after
        2024-03-05 23:30 EST, even though the wall clocks differ by 7d0h30m.
        """
        settings = EngineSettings(time_zone="America/New_York", expiring_window=timedelta(days=7))
        window = TimeWindow(datetime(2024, 3, 1, 12, 0, tzinfo=UTC), 11, settings)
        now = datetime(2024, 3, 6, 4, 30, tzinfo=UTC)
        assert window.is_expiring(now) is True


class TestRecent:
    def test_online_four_days_ago_is_recent(self):
        assert TimeWindow(NOW - timedelta(days=4), 30).is_recent(NOW) is True

    def test_online_fifteen_days_ago_is_not_recent(self):
        assert TimeWindow(NOW - timedelta(days=15), 30).is_recent(NOW) is False

    def test_future_online_date_is_not_recent(self):
        assert TimeWindow(NOW + timedelta(days=1), 30).is_recent(NOW) is False

    def test_independent_of_expiration(self):
        """A force-closed project can still be listed as new."""
        window = TimeWindow(NOW - timedelta(days=3), -5)
        assert window.is_expired(NOW) is True
        assert window.is_recent(NOW) is True

    def test_false_without_online_date(self):
        assert TimeWindow(None, 30).is_recent(NOW) is False

    def test_recent_window_is_elapsed_time_across_dst(self):
        """Online 6d23h30m of real time before now, across spring-forward."""
        window = TimeWindow(datetime(2024, 3, 5, 16, 30, tzinfo=UTC), 30, NEW_YORK)
        assert window.is_recent(datetime(2024, 3, 12, 16, 0, tzinfo=UTC)) is True


class TestScheduledInFuture:
    def test_future(self):
        assert TimeWindow(NOW + timedelta(minutes=1), 30).is_scheduled_in_future(NOW) is True

    def test_past(self):
        assert TimeWindow(NOW, 30).is_scheduled_in_future(NOW) is False
