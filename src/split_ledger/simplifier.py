"""Debt simplification: greedy matching of debtors and creditors.

The algorithm works by:
1. Separating members into debtors (negative balance) and creditors (positive balance)
2. Sorting both by magnitude, largest first, ties broken by member id
3. Walking both lists with two pointers, settling min(debt, credit) at each step
4. Advancing whichever side is fully settled (both, if both are)

This is a deterministic heuristic, not a minimum-transaction solver. It emits
at most ``debtors + creditors - 1`` payments and settles exactly the sum of the
positive balances.
"""

import logging
from collections.abc import Mapping

from .exceptions import IntegrityViolation, UnbalancedLedger
from .models import Balances, Debt, MemberId

logger = logging.getLogger(__name__)


def _sorted_by_magnitude(entries: list[tuple[MemberId, int]]) -> list[list]:
    """Sort (member, magnitude) pairs largest first, then by member id."""
    entries.sort(key=lambda entry: (-entry[1], entry[0]))
    return [[member_id, amount] for member_id, amount in entries]


def compute_settlement_plan(
    balances: Mapping[MemberId, int],
    settle_threshold: int = 1,
) -> list[Debt]:
    """
    Compute a list of payments that brings every balance to zero.

    Args:
        balances: Mapping of member id -> signed balance in minor units
        settle_threshold: Balances with a magnitude below this count as settled

    Returns:
        Settlement plan, largest debtor's payments first

    Raises:
        ValueError: If settle_threshold < 1
        UnbalancedLedger: If the balances don't sum to zero
    """
    if settle_threshold < 1:
        raise ValueError(f"settle_threshold must be at least 1, got {settle_threshold}")

    total = sum(balances.values())
    if total != 0:
        raise UnbalancedLedger(total)

    debtors = _sorted_by_magnitude(
        [(member_id, -b) for member_id, b in balances.items() if b <= -settle_threshold]
    )
    creditors = _sorted_by_magnitude(
        [(member_id, b) for member_id, b in balances.items() if b >= settle_threshold]
    )

    plan: list[Debt] = []
    debtor_index = 0
    creditor_index = 0

    while debtor_index < len(debtors) and creditor_index < len(creditors):
        debtor = debtors[debtor_index]
        creditor = creditors[creditor_index]

        amount = min(debtor[1], creditor[1])
        if amount >= 1:
            plan.append(Debt(from_member=debtor[0], to_member=creditor[0], amount=amount))
            logger.debug(f"{debtor[0]!r} pays {creditor[0]!r}: {amount}")

        debtor[1] -= amount
        creditor[1] -= amount

        if debtor[1] < settle_threshold:
            debtor_index += 1
        if creditor[1] < settle_threshold:
            creditor_index += 1

    logger.info(
        f"Settlement plan: {len(plan)} payments for {len(debtors)} debtors "
        f"and {len(creditors)} creditors"
    )
    return plan


def apply_settlement_plan(
    balances: Mapping[MemberId, int], plan: list[Debt]
) -> Balances:
    """Return the balances that remain once every payment in the plan is made."""
    remaining = dict(balances)
    for debt in plan:
        remaining[debt.from_member] = remaining.get(debt.from_member, 0) + debt.amount
        remaining[debt.to_member] = remaining.get(debt.to_member, 0) - debt.amount
    return remaining


def is_settled(balances: Mapping[MemberId, int], settle_threshold: int = 1) -> bool:
    """True if nobody owes or is owed anything."""
    return all(abs(balance) < settle_threshold for balance in balances.values())


def verify_settlement_plan(
    balances: Mapping[MemberId, int], plan: list[Debt], settle_threshold: int = 1
) -> None:
    """
    Check that paying every debt in the plan settles the group.

    Raises:
        IntegrityViolation: If a payment is self-directed or any balance remains
    """
    for debt in plan:
        if debt.from_member == debt.to_member:
            raise IntegrityViolation(f"Plan contains a self-payment for {debt.from_member!r}")

    remaining = apply_settlement_plan(balances, plan)
    unsettled = {
        member_id: balance
        for member_id, balance in remaining.items()
        if abs(balance) >= settle_threshold
    }
    if unsettled:
        raise IntegrityViolation(f"Plan leaves balances unsettled: {unsettled}")


def debt_between(plan: list[Debt], from_member: MemberId, to_member: MemberId) -> int:
    """Total planned payment from one member to another (0 if none)."""
    return sum(
        debt.amount
        for debt in plan
        if debt.from_member == from_member and debt.to_member == to_member
    )


def debts_for_member(
    plan: list[Debt], member_id: MemberId
) -> tuple[list[Debt], list[Debt]]:
    """
    Split a plan into what a member has to pay and what they will receive.

    Returns:
        Tuple of (to_pay, to_receive)
    """
    to_pay = [debt for debt in plan if debt.from_member == member_id]
    to_receive = [debt for debt in plan if debt.to_member == member_id]
    return to_pay, to_receive
