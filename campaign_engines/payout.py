"""
campaign_engines.payout -- Payout reconciliation.

Responsibility:
    Compare what the project owner should have received (net of payment
    service fees and the platform fee) against the payouts actually
    recorded, and decide whether the project is paid.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Invoked by financial reporting independently of the lifecycle engine.

Invariants enforced:
    - Exact equality in whole cents (Decimal quantize, ROUND_HALF_UP);
      never an approximate float comparison.
    - Always recomputed from source values.  The result is never cached,
      so reconciliation drift cannot be masked by a stale answer.
    - Reversals (negative payouts) are netted into the paid amount.
    - No payouts at all means not paid, even when the net amount is zero.

Failure modes:
    - None.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from campaign_kernel.domain.entities import Contribution, ContributionState, Payout, Project
from campaign_kernel.domain.values import ZERO, quantize_cents, sum_amounts, to_decimal
from campaign_engines.tracer import traced_engine

# Money the platform still holds on the owner's behalf
NET_COUNTED_STATES = frozenset({
    ContributionState.CONFIRMED,
    ContributionState.REQUESTED_REFUND,
})


@dataclass(frozen=True)
class PayoutReconciliation:
    """
    Reconciliation of one project's payouts.

    ``difference`` is ``net_amount - paid_amount``: positive means the
    owner is still owed money, negative means they were overpaid.
    """

    project_id: int | str
    gross_amount: Decimal
    payment_service_fees: Decimal
    platform_fee_amount: Decimal
    net_amount: Decimal
    paid_amount: Decimal
    payout_count: int

    @property
    def difference(self) -> Decimal:
        return self.net_amount - self.paid_amount

    @property
    def is_paid(self) -> bool:
        return self.payout_count > 0 and self.difference == ZERO


class PayoutReconciler:
    """
    Pure payout reconciliation.

    Contract:
        ``platform_fee`` is the fraction retained by the platform
        (``Decimal("0.1")`` == 10%), injected from configuration.
        Contributions and payouts are the project's own, already loaded;
        like ``ContributionLedger`` it does not re-filter by ``project_id``.
    Guarantees:
        - ``net_amount`` = gross - payment service fees - gross * platform_fee,
          rounded to cents.
        - ``is_paid`` is idempotent and side-effect free.
    """

    def __init__(self, platform_fee: Decimal = ZERO):
        self._platform_fee = to_decimal(platform_fee)

    @property
    def platform_fee(self) -> Decimal:
        return self._platform_fee

    @traced_engine("payout", "1.0", fingerprint_fields=("contributions", "payouts"))
    def reconcile(
        self,
        project: Project,
        contributions: Iterable[Contribution],
        payouts: Iterable[Payout],
    ) -> PayoutReconciliation:
        counted = tuple(c for c in contributions if c.state in NET_COUNTED_STATES)
        payouts = tuple(payouts)

        gross = sum_amounts(c.value for c in counted)
        service_fees = sum_amounts(c.payment_service_fee for c in counted)
        platform_fee_amount = gross * self._platform_fee

        return PayoutReconciliation(
            project_id=project.id,
            gross_amount=gross,
            payment_service_fees=service_fees,
            platform_fee_amount=quantize_cents(platform_fee_amount),
            net_amount=quantize_cents(gross - service_fees - platform_fee_amount),
            paid_amount=quantize_cents(sum_amounts(p.value for p in payouts)),
            payout_count=len(payouts),
        )

    def is_paid(
        self,
        project: Project,
        contributions: Iterable[Contribution],
        payouts: Iterable[Payout],
    ) -> bool:
        return self.reconcile(project, contributions, payouts).is_paid
