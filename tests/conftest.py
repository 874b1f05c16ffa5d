"""
Pytest fixtures for the campaign kernel test suite.

Provides:
- Structured logging configured once per session, captured per test
- A deterministic clock pinned to 2024-01-15 12:00 UTC
- Project / contribution / payout factories with realistic defaults
"""

import json
import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from io import StringIO
from itertools import count

import pytest

from campaign_kernel.domain.clock import DeterministicClock
from campaign_kernel.domain.entities import (
    CampaignType,
    Contribution,
    ContributionState,
    Payout,
    Project,
    ProjectState,
)
from campaign_kernel.domain.settings import EngineSettings
from campaign_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from campaign_engines.lifecycle import ProjectLifecycle

NOW = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG, stream=StringIO())
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture campaign_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, lifecycle):
            lifecycle.derive_state(...)
            logs = captured_logs()
            assert any(r["message"] == "CAMPAIGN_ENGINE_TRACE" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("campaign_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Clock and settings
# =============================================================================


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def clock() -> DeterministicClock:
    return DeterministicClock(NOW)


@pytest.fixture
def settings() -> EngineSettings:
    return EngineSettings(platform_fee=Decimal("0.1"))


@pytest.fixture
def lifecycle(settings) -> ProjectLifecycle:
    return ProjectLifecycle(settings)


# =============================================================================
# Entity factories
# =============================================================================


@pytest.fixture
def make_project():
    """
    Build a Project; defaults to an online all-or-none campaign that went
    live at NOW for 30 days with a goal of 3000.
    """
    ids = count(1)

    def _make(**overrides) -> Project:
        n = next(ids)
        fields = dict(
            id=n,
            goal=Decimal("3000"),
            online_date=NOW,
            online_days=30,
            campaign_type=CampaignType.ALL_OR_NONE,
            state=ProjectState.ONLINE,
            permalink=f"project-{n}",
            name=f"Project {n}",
            location="San Francisco, CA",
            user_id=100 + n,
            created_at=NOW - timedelta(days=10),
        )
        fields.update(overrides)
        return Project(**fields)

    return _make


@pytest.fixture
def make_contribution():
    """Build a confirmed contribution of 10 to the given project."""
    ids = count(1)

    def _make(project: Project, **overrides) -> Contribution:
        fields = dict(
            id=next(ids),
            project_id=project.id,
            value=Decimal("10"),
            state=ContributionState.CONFIRMED,
            user_id=1,
            payment_method="paypal",
            created_at=NOW - timedelta(hours=1),
        )
        fields.update(overrides)
        if fields["state"] == ContributionState.CONFIRMED and "confirmed_at" not in overrides:
            fields["confirmed_at"] = fields["created_at"]
        return Contribution(**fields)

    return _make


@pytest.fixture
def make_payout():
    ids = count(1)

    def _make(project: Project, value, **overrides) -> Payout:
        fields = dict(id=next(ids), project_id=project.id, value=value, created_at=NOW)
        fields.update(overrides)
        return Payout(**fields)

    return _make
