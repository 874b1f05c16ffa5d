"""
Config → Engine Bridges.

Convert a loaded ``Configuration`` into the frozen ``EngineSettings`` the
engines accept.  These live in campaign_config (the producer) because
the engines must NEVER import campaign_config.

Usage:
    from campaign_config import get_active_config
    from campaign_config.bridges import engine_settings_from

    settings = engine_settings_from(get_active_config())
    lifecycle = ProjectLifecycle(settings)
"""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from campaign_config.configuration import Configuration
from campaign_kernel.domain.settings import DEFAULT_SETTINGS, EngineSettings
from campaign_kernel.domain.values import to_decimal
from campaign_kernel.exceptions import InvalidConfigurationError


def _days(config: Configuration, key: str, default: timedelta) -> timedelta:
    value = config.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise InvalidConfigurationError(key, value, "must be a whole number of days")
    try:
        days = int(value)
    except ValueError:
        raise InvalidConfigurationError(key, value, "must be a whole number of days") from None
    if days < 0:
        raise InvalidConfigurationError(key, value, "must not be negative")
    return timedelta(days=days)


def _platform_fee(config: Configuration) -> Decimal:
    value: Any = config.get("platform_fee")
    if value is None:
        return DEFAULT_SETTINGS.platform_fee
    try:
        fee = to_decimal(value)
    except ValueError:
        raise InvalidConfigurationError("platform_fee", value, "must be a number") from None
    if not Decimal("0") <= fee < Decimal("1"):
        raise InvalidConfigurationError("platform_fee", value, "must be in [0, 1)")
    return fee


def _time_zone(config: Configuration) -> str:
    value = config.get("time_zone")
    if value is None:
        return DEFAULT_SETTINGS.time_zone
    name = str(value)
    if name.upper() == "UTC":
        return name
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise InvalidConfigurationError("time_zone", value, "unknown time zone") from None
    return name


def _channel_suffix(config: Configuration) -> str:
    value = config.get("channel_suffix")
    if value is None:
        return DEFAULT_SETTINGS.channel_suffix
    if not isinstance(value, str):
        raise InvalidConfigurationError("channel_suffix", value, "must be a string")
    return value


def engine_settings_from(config: Configuration) -> EngineSettings:
    """
    Build ``EngineSettings`` from configuration values.

    Recognized keys (all optional; defaults from ``DEFAULT_SETTINGS``):
        time_zone, platform_fee, expiring_window_days, recent_window_days,
        wait_window_days, channel_suffix.

    Raises:
        InvalidConfigurationError: if a present value cannot be used.
    """
    return EngineSettings(
        time_zone=_time_zone(config),
        expiring_window=_days(config, "expiring_window_days", DEFAULT_SETTINGS.expiring_window),
        recent_window=_days(config, "recent_window_days", DEFAULT_SETTINGS.recent_window),
        wait_window=_days(config, "wait_window_days", DEFAULT_SETTINGS.wait_window),
        platform_fee=_platform_fee(config),
        channel_suffix=_channel_suffix(config),
    )
