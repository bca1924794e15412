"""Tests for greedy debt simplification."""

import random

import pytest

from split_ledger.exceptions import IntegrityViolation, UnbalancedLedger
from split_ledger.models import Debt
from split_ledger.simplifier import (
    apply_settlement_plan,
    compute_settlement_plan,
    debt_between,
    debts_for_member,
    is_settled,
    verify_settlement_plan,
)


def random_balances(seed: int) -> dict[str, int]:
    """Random balances that sum to zero, with some members already settled."""
    rng = random.Random(seed)
    members = [f"m{i:02d}" for i in range(rng.randint(1, 15))]
    balances = {member: rng.choice([0, rng.randint(-10_000, 10_000)]) for member in members}
    balances[members[-1]] -= sum(balances.values())
    return balances


def edges(plan: list[Debt]) -> list[tuple[str, str, int]]:
    return [(debt.from_member, debt.to_member, debt.amount) for debt in plan]


class TestComputeSettlementPlan:
    """Test the greedy matching itself."""

    def test_equal_split_scenario(self):
        plan = compute_settlement_plan({"A": 60, "B": -30, "C": -30})

        assert edges(plan) == [("B", "A", 30), ("C", "A", 30)]

    def test_largest_first_matching(self):
        plan = compute_settlement_plan({"a": -50, "b": -20, "c": 40, "d": 30})

        assert edges(plan) == [("a", "c", 40), ("a", "d", 10), ("b", "d", 20)]

    def test_both_pointers_advance_on_exact_match(self):
        plan = compute_settlement_plan({"a": -40, "b": -10, "c": 40, "d": 10})

        assert edges(plan) == [("a", "c", 40), ("b", "d", 10)]

    def test_ties_broken_by_member_id(self):
        """Input order doesn't matter; equal magnitudes sort by id."""
        forward = compute_settlement_plan({"x": -10, "y": -10, "p": 10, "q": 10})
        backward = compute_settlement_plan({"q": 10, "p": 10, "y": -10, "x": -10})

        assert edges(forward) == edges(backward) == [("x", "p", 10), ("y", "q", 10)]

    def test_one_unit_balances_still_settle(self):
        assert edges(compute_settlement_plan({"a": -1, "b": 1})) == [("a", "b", 1)]

    def test_settled_group(self):
        assert compute_settlement_plan({"a": 0, "b": 0}) == []
        assert compute_settlement_plan({}) == []

    def test_unbalanced_ledger(self):
        with pytest.raises(UnbalancedLedger, match="got 5") as exc_info:
            compute_settlement_plan({"a": -10, "b": 15})

        assert exc_info.value.total == 5

    def test_unbalanced_is_integrity_violation(self):
        with pytest.raises(IntegrityViolation):
            compute_settlement_plan({"a": 1})

    @pytest.mark.parametrize("threshold", [0, -1])
    def test_threshold_below_one_rejected(self, threshold):
        """A zero threshold would let settled members into both sides."""
        with pytest.raises(ValueError, match="at least 1"):
            compute_settlement_plan({"A": 5, "B": -5}, settle_threshold=threshold)

    def test_larger_threshold_skips_small_balances(self):
        plan = compute_settlement_plan(
            {"a": -100, "b": -2, "c": 102}, settle_threshold=5
        )

        assert edges(plan) == [("a", "c", 100)]

    def test_does_not_mutate_balances(self):
        balances = {"A": 60, "B": -30, "C": -30}

        compute_settlement_plan(balances)

        assert balances == {"A": 60, "B": -30, "C": -30}


class TestSettlementPlanProperties:
    """Property checks over random balances."""

    @pytest.mark.parametrize("seed", range(40))
    def test_plan_settles_everyone(self, seed):
        balances = random_balances(seed)

        plan = compute_settlement_plan(balances)

        nonzero = sum(1 for balance in balances.values() if balance != 0)
        assert sum(debt.amount for debt in plan) == sum(
            balance for balance in balances.values() if balance > 0
        )
        assert all(debt.from_member != debt.to_member for debt in plan)
        assert len(plan) <= max(nonzero - 1, 0)
        verify_settlement_plan(balances, plan)

    @pytest.mark.parametrize("seed", range(10))
    def test_plan_is_deterministic(self, seed):
        balances = random_balances(seed)
        reordered = dict(reversed(list(balances.items())))

        assert compute_settlement_plan(balances) == compute_settlement_plan(reordered)


class TestPlanHelpers:
    """Test helpers that apply and query plans."""

    @pytest.fixture
    def balances(self):
        return {"a": -50, "b": -20, "c": 40, "d": 30}

    @pytest.fixture
    def plan(self, balances):
        return compute_settlement_plan(balances)

    def test_apply_settlement_plan(self, balances, plan):
        remaining = apply_settlement_plan(balances, plan)

        assert remaining == {"a": 0, "b": 0, "c": 0, "d": 0}
        assert is_settled(remaining)
        assert not is_settled(balances)

    def test_apply_partial_plan(self, balances, plan):
        remaining = apply_settlement_plan(balances, plan[:1])

        assert remaining == {"a": -10, "b": -20, "c": 0, "d": 30}

    def test_verify_rejects_incomplete_plan(self, balances, plan):
        with pytest.raises(IntegrityViolation, match="unsettled"):
            verify_settlement_plan(balances, plan[:-1])

    def test_verify_rejects_self_payment(self):
        with pytest.raises(IntegrityViolation, match="self-payment"):
            verify_settlement_plan(
                {"a": 0}, [Debt(from_member="a", to_member="a", amount=1)]
            )

    def test_debt_between(self, plan):
        assert debt_between(plan, "a", "d") == 10
        assert debt_between(plan, "b", "c") == 0
        assert debt_between(plan, "d", "a") == 0

    def test_debts_for_member(self, plan):
        to_pay, to_receive = debts_for_member(plan, "a")
        assert edges(to_pay) == [("a", "c", 40), ("a", "d", 10)]
        assert to_receive == []

        to_pay, to_receive = debts_for_member(plan, "d")
        assert to_pay == []
        assert edges(to_receive) == [("a", "d", 10), ("b", "d", 20)]
