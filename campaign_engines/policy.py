"""
campaign_engines.policy -- All-or-none vs. flexible funding rules.

Responsibility:
    Decide what a missed goal means for each campaign type.  The goal
    predicates themselves are policy independent; the policy table maps
    "goal not reached at expiration" to a project outcome.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Consulted by the lifecycle engine only when a transition into a final
    state is evaluated.

Invariants enforced:
    - ``GOAL_NOT_REACHED_OUTCOME`` covers every ``CampaignType`` member;
      checked when the module is imported.
    - The campaign type is fixed at project creation; nothing here
      changes it.
"""

from __future__ import annotations

from decimal import Decimal

from campaign_kernel.domain.entities import CampaignType, Project, ProjectState
from campaign_kernel.domain.values import to_decimal

# all_or_none: a missed goal fails the project and confirmed backers are refunded.
# flexible: the owner keeps what was pledged; the project waits for manual
# confirmation instead of failing.
GOAL_NOT_REACHED_OUTCOME: dict[CampaignType, ProjectState] = {
    CampaignType.ALL_OR_NONE: ProjectState.FAILED,
    CampaignType.FLEXIBLE: ProjectState.WAITING_FUNDS,
}

_missing = set(CampaignType) - set(GOAL_NOT_REACHED_OUTCOME)
if _missing:
    raise RuntimeError(f"No goal-not-reached outcome for campaign types: {sorted(_missing)}")


def reached_goal(pledged: Decimal, goal: Decimal) -> bool:
    """True iff ``pledged >= goal`` (the boundary counts as reached)."""
    return to_decimal(pledged) >= to_decimal(goal)


def pending_contributions_reached_the_goal(
    pledged: Decimal, waiting: Decimal, goal: Decimal
) -> bool:
    """True when confirmations still pending would carry the project to its goal."""
    return to_decimal(pledged) + to_decimal(waiting) >= to_decimal(goal)


def is_all_or_none(project: Project) -> bool:
    return project.campaign_type is CampaignType.ALL_OR_NONE


def is_flexible(project: Project) -> bool:
    return project.campaign_type is CampaignType.FLEXIBLE


def outcome_when_goal_not_reached(campaign_type: CampaignType) -> ProjectState:
    return GOAL_NOT_REACHED_OUTCOME[CampaignType(campaign_type)]


def refund_eligible(campaign_type: CampaignType, goal_reached: bool) -> bool:
    """Whether confirmed contributions become refundable at expiration."""
    return not goal_reached and outcome_when_goal_not_reached(campaign_type) is ProjectState.FAILED
