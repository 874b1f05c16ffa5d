"""
campaign_engines.scopes -- Collection filters over already-fetched projects.

Responsibility:
    The listing predicates used by discovery pages, notification jobs and
    the expiration sweep, expressed as pure order-preserving filters.
    The repository layer fetches; these functions only select.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    Builds on ``time_window`` and the entity state sets.

Invariants enforced:
    - Every filter preserves the relative order of its input.
    - ``visible`` excludes exactly draft, rejected and deleted.
    - Time-based filters take ``now`` explicitly.

Failure modes:
    - ``find_by_permalink`` raises ``ProjectNotFoundError`` when no
      non-deleted project matches.  Nothing else raises.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime

from campaign_kernel.domain.entities import (
    FINISHABLE_STATES,
    HIDDEN_STATES,
    Contribution,
    ContributionState,
    Project,
    ProjectState,
)
from campaign_kernel.domain.settings import DEFAULT_SETTINGS, EngineSettings
from campaign_kernel.exceptions import ProjectNotFoundError
from campaign_engines.time_window import TimeWindow, localize

# Workflow states in declaration order; deleted is a soft-delete marker
WORKFLOW_STATES: tuple[ProjectState, ...] = (
    ProjectState.DRAFT,
    ProjectState.SOON,
    ProjectState.REJECTED,
    ProjectState.ONLINE,
    ProjectState.SUCCESSFUL,
    ProjectState.WAITING_FUNDS,
    ProjectState.FAILED,
)


def state_names() -> list[str]:
    return [state.value for state in WORKFLOW_STATES]


def visible(projects: Iterable[Project]) -> list[Project]:
    return [p for p in projects if p.state not in HIDDEN_STATES]


def not_soon(projects: Iterable[Project]) -> list[Project]:
    return [p for p in projects if p.state is not ProjectState.SOON]


def with_states(projects: Iterable[Project], states: Iterable[ProjectState | str]) -> list[Project]:
    wanted = {ProjectState(s) for s in states}
    return [p for p in projects if p.state in wanted]


def expired(
    projects: Iterable[Project], now: datetime, settings: EngineSettings = DEFAULT_SETTINGS
) -> list[Project]:
    return [p for p in projects if TimeWindow.for_project(p, settings).is_expired(now)]


def not_expired(
    projects: Iterable[Project], now: datetime, settings: EngineSettings = DEFAULT_SETTINGS
) -> list[Project]:
    """Projects whose window is still open, including unscheduled ones."""
    return [p for p in projects if not TimeWindow.for_project(p, settings).is_expired(now)]


def expiring(
    projects: Iterable[Project], now: datetime, settings: EngineSettings = DEFAULT_SETTINGS
) -> list[Project]:
    return [p for p in projects if TimeWindow.for_project(p, settings).is_expiring(now)]


def not_expiring(
    projects: Iterable[Project], now: datetime, settings: EngineSettings = DEFAULT_SETTINGS
) -> list[Project]:
    """Open projects closing after the expiring window."""
    result = []
    for project in projects:
        window = TimeWindow.for_project(project, settings)
        if not window.is_expired(now) and not window.is_expiring(now):
            result.append(project)
    return result


def recent(
    projects: Iterable[Project], now: datetime, settings: EngineSettings = DEFAULT_SETTINGS
) -> list[Project]:
    return [p for p in projects if TimeWindow.for_project(p, settings).is_recent(now)]


def to_finish(
    projects: Iterable[Project], now: datetime, settings: EngineSettings = DEFAULT_SETTINGS
) -> list[Project]:
    """Expired projects still online or waiting for funds: the sweep's work list."""
    return [p for p in expired(projects, now, settings) if p.state in FINISHABLE_STATES]


def contributed_by(
    projects: Iterable[Project],
    contributions: Iterable[Contribution],
    user_id: int | str,
) -> list[Project]:
    """Projects the user backed with at least one confirmed contribution."""
    backed = {
        c.project_id for c in contributions
        if c.user_id == user_id and c.state is ContributionState.CONFIRMED
    }
    return [p for p in projects if p.id in backed]


def with_contributions_confirmed_today(
    projects: Iterable[Project],
    contributions: Iterable[Contribution],
    now: datetime,
    settings: EngineSettings = DEFAULT_SETTINGS,
) -> list[Project]:
    """Projects with a contribution confirmed on ``now``'s calendar day."""
    tz = settings.tzinfo
    today = localize(now, tz).date()
    confirmed_today = {
        c.project_id for c in contributions
        if c.state is ContributionState.CONFIRMED
        and c.confirmed_at is not None
        and localize(c.confirmed_at, tz).date() == today
    }
    return [p for p in projects if p.id in confirmed_today]


def between_created_at(
    projects: Iterable[Project],
    start: date,
    end: date,
    settings: EngineSettings = DEFAULT_SETTINGS,
) -> list[Project]:
    """Projects created on a day within ``[start, end]``."""
    if isinstance(start, datetime):
        start = localize(start, settings.tzinfo).date()
    if isinstance(end, datetime):
        end = localize(end, settings.tzinfo).date()
    result = []
    for project in projects:
        if project.created_at is None:
            continue
        created = localize(project.created_at, settings.tzinfo).date()
        if start <= created <= end:
            result.append(project)
    return result


def locations(projects: Iterable[Project]) -> list[str]:
    """Distinct locations of visible projects, in first-seen order."""
    seen: dict[str, None] = {}
    for project in visible(projects):
        if project.location:
            seen.setdefault(project.location, None)
    return list(seen)


def find_by_permalink(projects: Iterable[Project], permalink: str) -> Project:
    """
    Case-insensitive permalink lookup that never returns a deleted project.

    Raises:
        ProjectNotFoundError: if no non-deleted project matches.
    """
    wanted = permalink.lower()
    for project in projects:
        if project.state is ProjectState.DELETED:
            continue
        if project.permalink.lower() == wanted:
            return project
    raise ProjectNotFoundError(permalink)
