"""Ledger aggregation: fold expenses and completed payments into net balances."""

import logging
from collections.abc import Iterable

from .exceptions import CurrencyMismatch, IntegrityViolation, UnknownMember
from .models import Balances, Expense, GroupSnapshot, MemberId, MemberSummary, Payment
from .simplifier import compute_settlement_plan, debts_for_member
from .splits import validate_splits

logger = logging.getLogger(__name__)


def _credit(balances: Balances, member_id: MemberId, amount: int) -> None:
    if member_id not in balances:
        logger.warning(f"Member {member_id!r} is not in the member list, adding it")
        balances[member_id] = 0
    balances[member_id] += amount


def _check_currency(currency: str | None, record_currency: str, record_id: str) -> str:
    if currency is None:
        return record_currency
    if record_currency != currency:
        raise CurrencyMismatch(currency, record_currency, record_id)
    return currency


def compute_balances(
    expenses: Iterable[Expense],
    payments: Iterable[Payment],
    members: Iterable[MemberId],
    verify: bool = True,
    currency: str | None = None,
) -> Balances:
    """
    Compute every member's net balance from the full ledger.

    Positive means the member is owed money, negative means they owe money.
    Balances are always recomputed from scratch; only completed payments count.

    Args:
        expenses: Committed expenses with their splits
        payments: Payments in any status
        members: Known member ids (all start at zero)
        verify: Check split sums and the zero-sum invariant
        currency: Expected currency; defaults to the first record's currency

    Returns:
        Mapping of member id -> signed balance in minor units

    Raises:
        IntegrityViolation: If verification is on and the ledger is inconsistent
        CurrencyMismatch: If records use more than one currency
    """
    balances: Balances = {member_id: 0 for member_id in members}

    expense_count = 0
    for expense in expenses:
        currency = _check_currency(currency, expense.currency, expense.id)
        if verify:
            validate_splits(expense)

        _credit(balances, expense.paid_by, expense.amount)
        for split in expense.splits:
            _credit(balances, split.member_id, -split.amount)
        expense_count += 1

    payment_count = 0
    for payment in payments:
        if not payment.is_completed:
            logger.debug(f"Skipping {payment.status} payment {payment.id!r}")
            continue
        currency = _check_currency(currency, payment.currency, payment.id)

        _credit(balances, payment.from_member, payment.amount)
        _credit(balances, payment.to_member, -payment.amount)
        payment_count += 1

    if verify:
        total = sum(balances.values())
        if total != 0:
            raise IntegrityViolation(
                f"Balances sum to {total} after folding {expense_count} expenses "
                f"and {payment_count} payments; expected 0"
            )

    logger.debug(
        f"Computed balances for {len(balances)} members from {expense_count} "
        f"expenses and {payment_count} completed payments"
    )
    return balances


def compute_snapshot_balances(snapshot: GroupSnapshot, verify: bool = True) -> Balances:
    """Compute balances for a whole group snapshot."""
    return compute_balances(
        snapshot.expenses,
        snapshot.payments,
        snapshot.member_ids(),
        verify=verify,
        currency=snapshot.currency,
    )


def compute_member_totals(
    expenses: Iterable[Expense],
    payments: Iterable[Payment],
    members: Iterable[MemberId],
) -> dict[MemberId, dict[str, int]]:
    """
    Break balances down into what each member paid, owed, sent and received.

    Returns:
        Mapping of member id -> dict with keys ``paid``, ``owed``, ``sent``
        and ``received``
    """
    totals: dict[MemberId, dict[str, int]] = {}

    def entry(member_id: MemberId) -> dict[str, int]:
        return totals.setdefault(
            member_id, {"paid": 0, "owed": 0, "sent": 0, "received": 0}
        )

    for member_id in members:
        entry(member_id)

    for expense in expenses:
        entry(expense.paid_by)["paid"] += expense.amount
        for split in expense.splits:
            entry(split.member_id)["owed"] += split.amount

    for payment in payments:
        if payment.is_completed:
            entry(payment.from_member)["sent"] += payment.amount
            entry(payment.to_member)["received"] += payment.amount

    return totals


def summarize_member(
    member_id: MemberId,
    snapshot: GroupSnapshot,
    settle_threshold: int = 1,
    verify: bool = True,
) -> MemberSummary:
    """
    Summarize one member's position in a group.

    Raises:
        UnknownMember: If the member has no ledger activity and isn't a group member
    """
    balances = compute_snapshot_balances(snapshot, verify=verify)
    if member_id not in balances:
        raise UnknownMember(member_id)

    totals = compute_member_totals(
        snapshot.expenses, snapshot.completed_payments(), snapshot.member_ids()
    )[member_id]
    plan = compute_settlement_plan(balances, settle_threshold=settle_threshold)
    to_pay, to_receive = debts_for_member(plan, member_id)

    return MemberSummary(
        member_id=member_id,
        total_paid=totals["paid"],
        total_owed=totals["owed"],
        payments_sent=totals["sent"],
        payments_received=totals["received"],
        net_balance=balances[member_id],
        to_pay=tuple(to_pay),
        to_receive=tuple(to_receive),
    )
