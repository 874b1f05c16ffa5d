"""
campaign_engines.ledger -- Contribution aggregation by state.

Responsibility:
    Roll a project's contributions up into the named totals every other
    component reads: pledged, pledged_and_waiting, waiting, refunded,
    pending, plus the cached rollup pass-throughs (total_contributions,
    total_payment_service_fee).  Also computes the progress percentage.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import campaign_kernel.domain.
    Consumed by the lifecycle engine (progress bars, state derivation).

Invariants enforced:
    - One consistent read: ``ContributionLedger.snapshot`` produces a
      single frozen ``FundingSnapshot``; transition decisions are taken
      from that snapshot, never from incremental deltas.
    - ``pledged`` reads through the cached ProjectTotal when it exists and
      falls back to a direct sum of confirmed contributions when it does
      not.  An absent rollup is never an error.
    - ``pledged_and_waiting`` is always a direct sum (never cached).
    - Decimal-only arithmetic; inputs are never mutated.

Failure modes:
    - None.  Degenerate goals (zero, negative) give progress == 0.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from campaign_kernel.domain.entities import (
    Contribution,
    ContributionState,
    ProjectTotal,
)
from campaign_kernel.domain.values import ZERO, sum_amounts, to_decimal
from campaign_engines.tracer import traced_engine

HUNDRED = Decimal("100")

PLEDGED_STATES = frozenset({ContributionState.CONFIRMED})
PLEDGED_AND_WAITING_STATES = frozenset({
    ContributionState.CONFIRMED,
    ContributionState.WAITING_CONFIRMATION,
})


def progress(goal: Decimal, pledged: Decimal) -> int:
    """
    Integer funding percentage, half-up, never clamped.

    Returns 0 when either the goal or the pledged amount is not
    positive.  An overfunded project reports more than 100.
    """
    goal = to_decimal(goal)
    pledged = to_decimal(pledged)
    if goal <= ZERO or pledged <= ZERO:
        return 0
    return int((pledged / goal * HUNDRED).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def sum_by_state(
    contributions: Iterable[Contribution],
    states: frozenset[ContributionState],
) -> Decimal:
    """Sum contribution values whose state is in ``states``."""
    return sum_amounts(c.value for c in contributions if c.state in states)


@dataclass(frozen=True)
class FundingSnapshot:
    """
    Funding totals of one project taken from a single read.

    ``has_cached_total`` records whether ``pledged`` came from the
    materialized rollup or from direct summation.
    """

    pledged: Decimal = ZERO
    pledged_and_waiting: Decimal = ZERO
    waiting_confirmation: Decimal = ZERO
    refunded: Decimal = ZERO
    pending: Decimal = ZERO
    total_contributions: int = 0
    total_payment_service_fee: Decimal = ZERO
    has_cached_total: bool = False

    def progress(self, goal: Decimal) -> int:
        return progress(goal, self.pledged)


class ContributionLedger:
    """
    Pure aggregation of contributions by state.

    Contract:
        No I/O, fully deterministic.  Contributions and the optional
        rollup are passed in already loaded.  They are taken to be the
        project's own; nothing is re-filtered by ``project_id``.
    Guarantees:
        - Empty contribution sets and an absent rollup give zero totals.
        - Contributions in states outside the named totals (canceled,
          deleted, invalid_payment, ...) are ignored.
    """

    @traced_engine("ledger", "1.0", fingerprint_fields=("contributions", "project_total"))
    def snapshot(
        self,
        contributions: Iterable[Contribution],
        project_total: ProjectTotal | None = None,
    ) -> FundingSnapshot:
        contributions = tuple(contributions)

        if project_total is not None:
            pledged = project_total.pledged
        else:
            pledged = sum_by_state(contributions, PLEDGED_STATES)

        return FundingSnapshot(
            pledged=pledged,
            pledged_and_waiting=sum_by_state(contributions, PLEDGED_AND_WAITING_STATES),
            waiting_confirmation=sum_by_state(
                contributions, frozenset({ContributionState.WAITING_CONFIRMATION})
            ),
            refunded=sum_by_state(contributions, frozenset({ContributionState.REFUNDED})),
            pending=sum_by_state(contributions, frozenset({ContributionState.PENDING})),
            total_contributions=self.total_contributions(project_total),
            total_payment_service_fee=self.total_payment_service_fee(project_total),
            has_cached_total=project_total is not None,
        )

    def pledged(
        self,
        contributions: Iterable[Contribution],
        project_total: ProjectTotal | None = None,
    ) -> Decimal:
        if project_total is not None:
            return project_total.pledged
        return sum_by_state(contributions, PLEDGED_STATES)

    def pledged_and_waiting(self, contributions: Iterable[Contribution]) -> Decimal:
        return sum_by_state(contributions, PLEDGED_AND_WAITING_STATES)

    def total_contributions(self, project_total: ProjectTotal | None) -> int:
        if project_total is None:
            return 0
        return project_total.total_contributions

    def total_payment_service_fee(self, project_total: ProjectTotal | None) -> Decimal:
        if project_total is None:
            return ZERO
        return project_total.total_payment_service_fee
