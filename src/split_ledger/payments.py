"""Validation of proposed manual payments against current obligations."""

import logging
from collections.abc import Mapping

from .exceptions import (
    NoCreditDue,
    NoDebtOwed,
    NonPositiveAmount,
    PaymentExceedsDebt,
    SelfPaymentError,
    UnknownMember,
)
from .models import MemberId, PaymentCheck
from .simplifier import compute_settlement_plan, debt_between

logger = logging.getLogger(__name__)


def validate_payment(
    from_member: MemberId,
    to_member: MemberId,
    amount: int,
    balances: Mapping[MemberId, int],
    tolerance: int = 1,
    settle_threshold: int = 1,
) -> PaymentCheck:
    """
    Check a proposed payment before it is recorded.

    Accepting a payment doesn't change any balance. Once the payment is stored
    as completed, balances are recomputed from the full ledger.

    Checks run in order: amount, self-payment, unknown member, sender debt,
    receiver credit, planned debt. An unknown member is reported before
    NoDebtOwed or NoCreditDue.

    Args:
        from_member: Member sending the money
        to_member: Member receiving the money
        amount: Payment amount in minor units
        balances: Current balances of the group
        tolerance: How far the amount may exceed the planned debt
        settle_threshold: Passed through to the settlement plan

    Returns:
        PaymentCheck with the planned debt between the pair

    Raises:
        NonPositiveAmount: If amount <= 0
        SelfPaymentError: If both members are the same
        UnknownMember: If either member has no balance in the group
        NoDebtOwed: If the sender doesn't owe anything
        NoCreditDue: If the receiver isn't owed anything
        PaymentExceedsDebt: If amount is larger than the planned debt
    """
    if amount <= 0:
        raise NonPositiveAmount(amount)
    if from_member == to_member:
        raise SelfPaymentError(from_member)

    for member_id in (from_member, to_member):
        if member_id not in balances:
            raise UnknownMember(member_id)

    if balances[from_member] >= 0:
        raise NoDebtOwed(from_member, balances[from_member])
    if balances[to_member] <= 0:
        raise NoCreditDue(to_member, balances[to_member])

    plan = compute_settlement_plan(balances, settle_threshold=settle_threshold)
    outstanding = debt_between(plan, from_member, to_member)

    if amount > outstanding + tolerance:
        raise PaymentExceedsDebt(from_member, to_member, amount, outstanding)

    logger.info(
        f"Accepted payment of {amount} from {from_member!r} to {to_member!r} "
        f"(outstanding: {outstanding})"
    )
    return PaymentCheck(
        from_member=from_member,
        to_member=to_member,
        amount=amount,
        outstanding=outstanding,
    )
