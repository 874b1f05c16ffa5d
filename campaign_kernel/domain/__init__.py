"""
Pure domain layer.

This module contains immutable entities and value helpers with NO
dependencies on:
- ORM / database
- Wall-clock time (see ``clock``)
- I/O

The engine receives these objects already loaded by the caller.
"""

from campaign_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from campaign_kernel.domain.entities import (
    EXTERNALLY_ASSIGNED_STATES,
    FINISHABLE_STATES,
    HIDDEN_STATES,
    CampaignType,
    Channel,
    Contribution,
    ContributionState,
    Payout,
    Project,
    ProjectState,
    ProjectTotal,
)
from campaign_kernel.domain.settings import DEFAULT_SETTINGS, EngineSettings
from campaign_kernel.domain.values import ZERO, quantize_cents, sum_amounts, to_decimal

__all__ = [
    "Clock",
    "DeterministicClock",
    "SystemClock",
    "EXTERNALLY_ASSIGNED_STATES",
    "FINISHABLE_STATES",
    "HIDDEN_STATES",
    "CampaignType",
    "Channel",
    "Contribution",
    "ContributionState",
    "Payout",
    "Project",
    "ProjectState",
    "ProjectTotal",
    "DEFAULT_SETTINGS",
    "EngineSettings",
    "ZERO",
    "quantize_cents",
    "sum_amounts",
    "to_decimal",
]
