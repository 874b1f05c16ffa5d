"""
Module: campaign_engines
Responsibility:
    Package entrypoint that re-exports the public symbols of the pure
    calculation engines.  This is the canonical import surface for the
    boundary layer (request handlers, schedulers, financial reporting).

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import campaign_kernel.  MUST NOT import campaign_config;
    configuration arrives as an injected ``EngineSettings`` value.

Invariants enforced:
    - Purity: engines NEVER call ``datetime.now()``.  ``now`` is passed in.
    - Decimal-only arithmetic for every amount.
    - Determinism: identical inputs always produce identical outputs.

Audit relevance:
    Engine entry points are wrapped by ``@traced_engine`` and emit
    CAMPAIGN_ENGINE_TRACE records with an input fingerprint, so a disputed
    state transition or payout decision can be replayed.

Usage:
    from campaign_engines import ProjectLifecycle, PayoutReconciler

    lifecycle = ProjectLifecycle(settings)
    decision = lifecycle.derive_state(project, contributions, now=clock.now())
    paid = PayoutReconciler(settings.platform_fee).is_paid(project, contributions, payouts)
"""

from campaign_engines import scopes
from campaign_engines.ledger import (
    ContributionLedger,
    FundingSnapshot,
    progress,
)
from campaign_engines.lifecycle import (
    DecisionReason,
    ProjectLifecycle,
    StateDecision,
)
from campaign_engines.payout import (
    NET_COUNTED_STATES,
    PayoutReconciler,
    PayoutReconciliation,
)
from campaign_engines.policy import (
    GOAL_NOT_REACHED_OUTCOME,
    is_all_or_none,
    is_flexible,
    outcome_when_goal_not_reached,
    pending_contributions_reached_the_goal,
    reached_goal,
    refund_eligible,
)
from campaign_engines.time_window import TimeWindow, end_of_day

__all__ = [
    "scopes",
    "ContributionLedger",
    "FundingSnapshot",
    "progress",
    "DecisionReason",
    "ProjectLifecycle",
    "StateDecision",
    "NET_COUNTED_STATES",
    "PayoutReconciler",
    "PayoutReconciliation",
    "GOAL_NOT_REACHED_OUTCOME",
    "is_all_or_none",
    "is_flexible",
    "outcome_when_goal_not_reached",
    "pending_contributions_reached_the_goal",
    "reached_goal",
    "refund_eligible",
    "TimeWindow",
    "end_of_day",
]
