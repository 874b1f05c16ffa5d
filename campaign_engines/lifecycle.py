"""
campaign_engines.lifecycle -- Project state derivation and progress queries.

Responsibility:
    The top-level query surface for a project: expiration, funding totals,
    progress, goal predicates, visibility, notification keys and the
    derived lifecycle state the expiration sweep should persist.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Delegates time arithmetic to ``time_window``, funding totals to
    ``ledger`` and the goal-not-reached outcome to ``policy``.
    Called by request handlers, schedulers and notification triggers,
    which own persistence.

Invariants enforced:
    - Two-tier state: draft, rejected and deleted are assigned outside the
      engine and returned unchanged.  successful and failed, once stored,
      are final.  Every other state is derived from (online_date,
      online_days, now, funding snapshot).
    - A decision is computed from one ``FundingSnapshot``; the same inputs
      always give the same decision, so retried sweeps agree.
    - Total functions: malformed numerics give degenerate output
      (progress == 0) instead of raising.

Failure modes:
    - None.  The engine never writes and never raises for missing data.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from campaign_kernel.domain.entities import (
    EXTERNALLY_ASSIGNED_STATES,
    HIDDEN_STATES,
    Channel,
    Contribution,
    ContributionState,
    Project,
    ProjectState,
)
from campaign_kernel.domain.settings import DEFAULT_SETTINGS, EngineSettings
from campaign_engines import policy
from campaign_engines.ledger import ContributionLedger, FundingSnapshot
from campaign_engines.time_window import TimeWindow, to_utc
from campaign_engines.tracer import traced_engine

FINAL_OUTCOME_STATES = frozenset({ProjectState.SUCCESSFUL, ProjectState.FAILED})


class DecisionReason(str, Enum):
    """Why ``derive_state`` returned the state it did."""

    EXTERNALLY_ASSIGNED = "externally_assigned"
    FINAL_OUTCOME = "final_outcome"
    NOT_SCHEDULED = "not_scheduled"
    SCHEDULED = "scheduled"
    FUNDRAISING = "fundraising"
    GOAL_REACHED = "goal_reached"
    AWAITING_CONFIRMATIONS = "awaiting_confirmations"
    GOAL_NOT_REACHED = "goal_not_reached"


@dataclass(frozen=True)
class StateDecision:
    """
    Derived state of one project at one instant.

    ``changed`` tells the sweep whether there is anything to persist.
    """

    project_id: int | str
    previous_state: ProjectState
    state: ProjectState
    reason: DecisionReason
    evaluated_at: datetime
    pledged: Decimal

    @property
    def changed(self) -> bool:
        return self.state is not self.previous_state


class ProjectLifecycle:
    """
    Query surface over one project and its already-loaded contributions.

    Contract:
        No I/O, no clock access -- ``now`` is always passed in.
        Settings are injected once at construction.
    Guarantees:
        - ``derive_state`` never overrides an externally assigned state.
        - Every query is idempotent.

    Usage:
        lifecycle = ProjectLifecycle(settings)
        decision = lifecycle.derive_state(project, contributions, now=clock.now())
        if decision.changed:
            repository.save_state(project.id, decision.state)  # caller's job
    """

    def __init__(
        self,
        settings: EngineSettings = DEFAULT_SETTINGS,
        ledger: ContributionLedger | None = None,
    ):
        self._settings = settings
        self._ledger = ledger or ContributionLedger()

    @property
    def settings(self) -> EngineSettings:
        return self._settings

    # -----------------------------------------------------------------
    # Time window
    # -----------------------------------------------------------------

    def time_window(self, project: Project) -> TimeWindow:
        return TimeWindow.for_project(project, self._settings)

    def expires_at(self, project: Project) -> datetime | None:
        return self.time_window(project).expires_at

    def is_expired(self, project: Project, now: datetime) -> bool:
        return self.time_window(project).is_expired(now)

    def is_expiring(self, project: Project, now: datetime) -> bool:
        return self.time_window(project).is_expiring(now)

    def is_recent(self, project: Project, now: datetime) -> bool:
        return self.time_window(project).is_recent(now)

    # -----------------------------------------------------------------
    # Funding
    # -----------------------------------------------------------------

    def snapshot(
        self, project: Project, contributions: Iterable[Contribution] = ()
    ) -> FundingSnapshot:
        return self._ledger.snapshot(contributions, project.project_total)

    def pledged(self, project: Project, contributions: Iterable[Contribution] = ()) -> Decimal:
        return self._ledger.pledged(contributions, project.project_total)

    def pledged_and_waiting(self, contributions: Iterable[Contribution]) -> Decimal:
        return self._ledger.pledged_and_waiting(contributions)

    def total_contributions(self, project: Project) -> int:
        return self._ledger.total_contributions(project.project_total)

    def total_payment_service_fee(self, project: Project) -> Decimal:
        return self._ledger.total_payment_service_fee(project.project_total)

    def progress(self, project: Project, contributions: Iterable[Contribution] = ()) -> int:
        return self.snapshot(project, contributions).progress(project.goal)

    def reached_goal(self, project: Project, contributions: Iterable[Contribution] = ()) -> bool:
        return policy.reached_goal(self.pledged(project, contributions), project.goal)

    def pending_contributions_reached_the_goal(
        self, project: Project, contributions: Iterable[Contribution]
    ) -> bool:
        snapshot = self.snapshot(project, contributions)
        return policy.pending_contributions_reached_the_goal(
            snapshot.pledged, snapshot.waiting_confirmation, project.goal
        )

    def in_time_to_wait(self, contributions: Iterable[Contribution], now: datetime) -> bool:
        """
        True while some waiting_confirmation contribution is younger than
        ``settings.wait_window``.  Age is elapsed real time, so a DST
        change inside the window does not move it.  Contributions without
        ``created_at`` are treated as just created.
        """
        tz = self._settings.tzinfo
        now = to_utc(now, tz)
        for contribution in contributions:
            if contribution.state is not ContributionState.WAITING_CONFIRMATION:
                continue
            if contribution.created_at is None:
                return True
            if now - to_utc(contribution.created_at, tz) < self._settings.wait_window:
                return True
        return False

    # -----------------------------------------------------------------
    # Campaign type
    # -----------------------------------------------------------------

    def is_all_or_none(self, project: Project) -> bool:
        return policy.is_all_or_none(project)

    def is_flexible(self, project: Project) -> bool:
        return policy.is_flexible(project)

    # -----------------------------------------------------------------
    # Visibility and notifications
    # -----------------------------------------------------------------

    @staticmethod
    def is_visible(project: Project) -> bool:
        return project.state not in HIDDEN_STATES

    @staticmethod
    def last_channel(project: Project) -> Channel | None:
        return project.channels[-1] if project.channels else None

    def notification_type(self, project: Project, base_type: str) -> str:
        if project.channels:
            return f"{base_type}{self._settings.channel_suffix}"
        return base_type

    # -----------------------------------------------------------------
    # State derivation
    # -----------------------------------------------------------------

    @traced_engine("lifecycle", "1.0", fingerprint_fields=("project", "contributions", "now"))
    def derive_state(
        self,
        project: Project,
        contributions: Sequence[Contribution],
        now: datetime,
    ) -> StateDecision:
        """
        Derive the state the project should be in at ``now``.

        Order of evaluation:
            1. draft / rejected / deleted are kept as stored.
            2. A stored successful / failed outcome is final.
            3. No online date: nothing to derive, keep stored state.
            4. Online date in the future: soon.
            5. Window still open: online.
            6. Expired with the goal reached: successful.
            7. Expired, goal missed, but pending confirmations would reach
               it and are still in time to wait: waiting_funds.
            8. Otherwise the campaign policy outcome (failed for
               all_or_none, waiting_funds for flexible).
        """
        contributions = tuple(contributions)
        snapshot = self.snapshot(project, contributions)
        window = self.time_window(project)

        def decide(state: ProjectState, reason: DecisionReason) -> StateDecision:
            return StateDecision(
                project_id=project.id,
                previous_state=project.state,
                state=state,
                reason=reason,
                evaluated_at=now,
                pledged=snapshot.pledged,
            )

        if project.state in EXTERNALLY_ASSIGNED_STATES:
            return decide(project.state, DecisionReason.EXTERNALLY_ASSIGNED)
        if project.state in FINAL_OUTCOME_STATES:
            return decide(project.state, DecisionReason.FINAL_OUTCOME)
        if project.online_date is None:
            return decide(project.state, DecisionReason.NOT_SCHEDULED)
        if window.is_scheduled_in_future(now):
            return decide(ProjectState.SOON, DecisionReason.SCHEDULED)
        if not window.is_expired(now):
            return decide(ProjectState.ONLINE, DecisionReason.FUNDRAISING)

        if policy.reached_goal(snapshot.pledged, project.goal):
            return decide(ProjectState.SUCCESSFUL, DecisionReason.GOAL_REACHED)

        if policy.pending_contributions_reached_the_goal(
            snapshot.pledged, snapshot.waiting_confirmation, project.goal
        ) and self.in_time_to_wait(contributions, now):
            return decide(ProjectState.WAITING_FUNDS, DecisionReason.AWAITING_CONFIRMATIONS)

        return decide(
            policy.outcome_when_goal_not_reached(project.campaign_type),
            DecisionReason.GOAL_NOT_REACHED,
        )
