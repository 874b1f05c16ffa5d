"""
Entities -- Immutable campaign records handed to the engines.

Responsibility:
    Frozen representations of a Project, its Contributions, Payouts, the
    optional cached ProjectTotal rollup and associated Channels.  The
    caller (repository, API handler, scheduler) loads these and passes
    them in; the engines only read them.

Architecture position:
    Kernel > Domain -- pure, zero I/O.

Invariants enforced:
    - Amounts are Decimal (coerced through ``to_decimal``).
    - State fields are enum members; unknown state strings raise
      ValueError at construction.
    - Two-tier project state: ``EXTERNALLY_ASSIGNED_STATES`` are written
      by moderators and owners only; every other state is derived by
      ``campaign_engines.lifecycle`` and persisted by the expiration sweep.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from campaign_kernel.domain.values import ZERO, to_decimal


class ProjectState(str, Enum):
    """Lifecycle state of a project."""

    DRAFT = "draft"
    SOON = "soon"
    REJECTED = "rejected"
    ONLINE = "online"
    SUCCESSFUL = "successful"
    WAITING_FUNDS = "waiting_funds"
    FAILED = "failed"
    DELETED = "deleted"  # Soft delete, not a workflow state


# Written by moderators/owners, never derived or overridden
EXTERNALLY_ASSIGNED_STATES: frozenset[ProjectState] = frozenset({
    ProjectState.DRAFT,
    ProjectState.REJECTED,
    ProjectState.DELETED,
})

HIDDEN_STATES: frozenset[ProjectState] = EXTERNALLY_ASSIGNED_STATES

# States the expiration sweep may move into a final outcome
FINISHABLE_STATES: frozenset[ProjectState] = frozenset({
    ProjectState.ONLINE,
    ProjectState.WAITING_FUNDS,
})


class ContributionState(str, Enum):
    """Payment state of a single contribution."""

    PENDING = "pending"
    WAITING_CONFIRMATION = "waiting_confirmation"
    CONFIRMED = "confirmed"
    CANCELED = "canceled"
    REFUNDED = "refunded"
    REQUESTED_REFUND = "requested_refund"
    REFUNDED_AND_CANCELED = "refunded_and_canceled"
    DELETED = "deleted"
    INVALID_PAYMENT = "invalid_payment"


class CampaignType(str, Enum):
    """Funding rule chosen when the project is created."""

    ALL_OR_NONE = "all_or_none"
    FLEXIBLE = "flexible"


@dataclass(frozen=True)
class ProjectTotal:
    """
    Cached per-project rollup.

    May not be materialized yet; ``Project.project_total`` is then None
    and every read through it falls back to zero.
    """

    pledged: Decimal = ZERO
    total_payment_service_fee: Decimal = ZERO
    total_contributions: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "pledged", to_decimal(self.pledged))
        object.__setattr__(
            self, "total_payment_service_fee", to_decimal(self.total_payment_service_fee)
        )


@dataclass(frozen=True)
class Channel:
    """Distribution channel a project is published through (read-only)."""

    id: int | str
    permalink: str = ""
    user_id: int | str | None = None


@dataclass(frozen=True)
class Project:
    """
    A crowdfunding project.

    ``online_days`` may be negative: a project force-closed before its
    nominal window.  ``online_date`` is None until the project is
    scheduled.
    """

    id: int | str
    goal: Decimal
    online_date: datetime | None = None
    online_days: int = 0
    campaign_type: CampaignType = CampaignType.ALL_OR_NONE
    state: ProjectState = ProjectState.DRAFT
    permalink: str = ""
    name: str = ""
    location: str | None = None
    user_id: int | str | None = None
    created_at: datetime | None = None
    channels: tuple[Channel, ...] = ()
    project_total: ProjectTotal | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "goal", to_decimal(self.goal))
        object.__setattr__(self, "online_days", int(self.online_days))
        object.__setattr__(self, "campaign_type", CampaignType(self.campaign_type))
        object.__setattr__(self, "state", ProjectState(self.state))
        object.__setattr__(self, "channels", tuple(self.channels))


@dataclass(frozen=True)
class Contribution:
    """A backer's pledge to one project."""

    id: int | str
    project_id: int | str
    value: Decimal
    state: ContributionState = ContributionState.PENDING
    user_id: int | str | None = None
    payment_method: str | None = None
    payment_service_fee: Decimal = ZERO
    created_at: datetime | None = None
    confirmed_at: datetime | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", to_decimal(self.value))
        object.__setattr__(self, "state", ContributionState(self.state))
        object.__setattr__(
            self,
            "payment_service_fee",
            to_decimal(self.payment_service_fee if self.payment_service_fee is not None else ZERO),
        )


@dataclass(frozen=True)
class Payout:
    """Money transferred to the project owner; negative for a reversal."""

    id: int | str
    project_id: int | str
    value: Decimal
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", to_decimal(self.value))
