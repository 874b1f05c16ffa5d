"""
Tests for the immutable entities and Decimal value helpers.

Verifies:
- Amount coercion to Decimal (floats through str)
- Enum coercion of state strings
- Immutability
- State sets of the two-tier model
"""

import dataclasses
from decimal import Decimal

import pytest

from campaign_kernel.domain.entities import (
    EXTERNALLY_ASSIGNED_STATES,
    FINISHABLE_STATES,
    HIDDEN_STATES,
    CampaignType,
    Contribution,
    ContributionState,
    Payout,
    Project,
    ProjectState,
    ProjectTotal,
)
from campaign_kernel.domain.values import quantize_cents, sum_amounts, to_decimal


class TestToDecimal:
    def test_decimal_passthrough(self):
        value = Decimal("10.50")
        assert to_decimal(value) is value

    def test_int(self):
        assert to_decimal(10) == Decimal("10")

    def test_float_goes_through_str(self):
        assert to_decimal(0.1) == Decimal("0.1")

    def test_string(self):
        assert to_decimal(" 99.99 ") == Decimal("99.99")

    @pytest.mark.parametrize("bad", ["abc", None, True, "NaN", "Infinity", object()])
    def test_rejects_non_amounts(self, bad):
        with pytest.raises(ValueError):
            to_decimal(bad)


class TestSumAndQuantize:
    def test_empty_sum_is_zero(self):
        assert sum_amounts([]) == Decimal("0")

    def test_quantize_half_up(self):
        assert quantize_cents(Decimal("1.005")) == Decimal("1.01")
        assert quantize_cents(Decimal("1.004")) == Decimal("1.00")


class TestProject:
    def test_coerces_fields(self):
        project = Project(id=1, goal=3000, campaign_type="flexible", state="online", online_days="5")
        assert project.goal == Decimal("3000")
        assert project.campaign_type is CampaignType.FLEXIBLE
        assert project.state is ProjectState.ONLINE
        assert project.online_days == 5

    def test_defaults(self):
        project = Project(id=1, goal=Decimal("10"))
        assert project.state is ProjectState.DRAFT
        assert project.campaign_type is CampaignType.ALL_OR_NONE
        assert project.online_date is None
        assert project.project_total is None
        assert project.channels == ()

    def test_unknown_state_rejected(self):
        with pytest.raises(ValueError):
            Project(id=1, goal=10, state="expired")

    def test_frozen(self):
        project = Project(id=1, goal=10)
        with pytest.raises(dataclasses.FrozenInstanceError):
            project.state = ProjectState.ONLINE


class TestContributionAndPayout:
    def test_contribution_coercion(self):
        contribution = Contribution(id=1, project_id=1, value="25.5", state="waiting_confirmation")
        assert contribution.value == Decimal("25.5")
        assert contribution.state is ContributionState.WAITING_CONFIRMATION
        assert contribution.payment_service_fee == Decimal("0")
        assert contribution.confirmed_at is None

    def test_none_service_fee_reads_as_zero(self):
        contribution = Contribution(id=1, project_id=1, value=10, payment_service_fee=None)
        assert contribution.payment_service_fee == Decimal("0")

    def test_negative_payout_allowed(self):
        assert Payout(id=1, project_id=1, value=-90).value == Decimal("-90")

    def test_project_total_defaults_to_zero(self):
        total = ProjectTotal()
        assert total.pledged == Decimal("0")
        assert total.total_payment_service_fee == Decimal("0")
        assert total.total_contributions == 0


class TestStateSets:
    def test_externally_assigned(self):
        assert EXTERNALLY_ASSIGNED_STATES == {ProjectState.DRAFT, ProjectState.REJECTED, ProjectState.DELETED}

    def test_hidden_matches_externally_assigned(self):
        assert HIDDEN_STATES == EXTERNALLY_ASSIGNED_STATES

    def test_finishable(self):
        assert FINISHABLE_STATES == {ProjectState.ONLINE, ProjectState.WAITING_FUNDS}
