"""
EngineSettings -- Immutable policy constants consumed by the engines.

The engines never load configuration.  The boundary layer obtains a
``Configuration`` once (``campaign_config.get_active_config``), translates
it with ``campaign_config.bridges.engine_settings_from`` and passes the
resulting frozen value into every engine it constructs.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta, timezone, tzinfo
from decimal import Decimal
from functools import cached_property
from zoneinfo import ZoneInfo

from campaign_kernel.domain.values import ZERO, to_decimal


@dataclass(frozen=True)
class EngineSettings:
    """
    Policy constants for time windows and payouts.

    Attributes:
        time_zone: IANA zone used to find "end of day" for expiration.
        expiring_window: Lookahead for near-deadline notifications.
        recent_window: Trailing window for "new campaigns" listings.
        wait_window: Grace period for waiting_confirmation contributions.
        platform_fee: Fraction of gross kept by the platform (0.1 == 10%).
        channel_suffix: Appended to notification keys of channel projects.
    """

    time_zone: str = "UTC"
    expiring_window: timedelta = timedelta(days=14)
    recent_window: timedelta = timedelta(days=7)
    wait_window: timedelta = timedelta(days=7)
    platform_fee: Decimal = ZERO
    channel_suffix: str = "_channel"

    def __post_init__(self) -> None:
        object.__setattr__(self, "platform_fee", to_decimal(self.platform_fee))

    @cached_property
    def tzinfo(self) -> tzinfo:
        if self.time_zone.upper() == "UTC":
            return timezone.utc
        return ZoneInfo(self.time_zone)


DEFAULT_SETTINGS = EngineSettings()
