"""Service layer that composes a storage source with the settlement engine.

The source is the only collaborator that touches storage. Everything after
``load_snapshot`` is a pure function of the snapshot.
"""

import logging
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any, Protocol

from .config import Settings
from .exceptions import UnknownMember
from .ledger import compute_snapshot_balances, summarize_member
from .models import (
    Balances,
    Debt,
    Expense,
    GroupSnapshot,
    Member,
    MemberId,
    MemberSummary,
    PaymentCheck,
    SplitPolicy,
)
from .money import format_amount
from .payments import validate_payment
from .records import parse_completed_payment, parse_expense
from .simplifier import compute_settlement_plan
from .splits import build_splits, calculate_split

logger = logging.getLogger(__name__)


class LedgerSource(Protocol):
    """Read access to a group's ledger, as provided by the storage layer."""

    def list_expenses(self, group_id: str) -> Sequence[Mapping[str, Any]]: ...

    def list_completed_payments(self, group_id: str) -> Sequence[Mapping[str, Any]]: ...

    def list_members(self, group_id: str) -> Sequence[str]: ...


class LedgerService:
    """Service for computing balances and settlement plans for groups."""

    def __init__(self, settings: Settings, source: LedgerSource):
        """Initialize the ledger service."""
        self.settings = settings
        self.source = source

    def load_snapshot(self, group_id: str) -> GroupSnapshot:
        """
        Read a group's members, expenses and completed payments into a snapshot.

        Args:
            group_id: The group to load

        Returns:
            Immutable snapshot of the group's ledger
        """
        member_ids = [str(member_id) for member_id in self.source.list_members(group_id)]
        expenses = tuple(
            parse_expense(group_id, data) for data in self.source.list_expenses(group_id)
        )
        payments = tuple(
            parse_completed_payment(group_id, data, index)
            for index, data in enumerate(self.source.list_completed_payments(group_id))
        )

        # The group's records decide its currency; the default covers empty ledgers
        records = (*expenses, *payments)
        currency = records[0].currency if records else self.settings.default_currency

        snapshot = GroupSnapshot(
            group_id=group_id,
            currency=currency,
            members=tuple(Member(id=member_id, name=member_id) for member_id in member_ids),
            expenses=expenses,
            payments=payments,
        )

        logger.info(
            f"Loaded group {group_id!r}: {len(member_ids)} members, "
            f"{len(expenses)} expenses, {len(payments)} payments"
        )
        return snapshot

    def balances(self, group_id: str) -> Balances:
        """Compute current balances for a group."""
        snapshot = self.load_snapshot(group_id)
        return compute_snapshot_balances(
            snapshot, verify=self.settings.verify_integrity
        )

    def settlement_plan(self, group_id: str) -> list[Debt]:
        """Compute the recommended payments that settle a group."""
        return compute_settlement_plan(
            self.balances(group_id), settle_threshold=self.settings.settle_threshold
        )

    def member_summary(self, group_id: str, member_id: MemberId) -> MemberSummary:
        """Summarize one member's position in a group."""
        snapshot = self.load_snapshot(group_id)
        return summarize_member(
            member_id,
            snapshot,
            settle_threshold=self.settings.settle_threshold,
            verify=self.settings.verify_integrity,
        )

    def prepare_expense(
        self,
        group_id: str,
        expense_id: str,
        amount: int,
        paid_by: MemberId,
        participants: Sequence[MemberId],
        policy: SplitPolicy,
        description: str = "",
        currency: str | None = None,
    ) -> Expense:
        """
        Compute the splits for a new (or edited) expense.

        Nothing is written; the caller stores the returned expense.

        Returns:
            Expense with splits that sum to ``amount``
        """
        member_ids = [str(member_id) for member_id in self.source.list_members(group_id)]
        if paid_by not in member_ids:
            raise UnknownMember(paid_by)

        shares = calculate_split(
            amount,
            participants,
            policy,
            members=member_ids,
            percentage_tolerance=self.settings.percentage_tolerance,
        )

        expense = Expense(
            id=expense_id,
            group_id=group_id,
            amount=amount,
            currency=currency or self.settings.default_currency,
            paid_by=paid_by,
            splits=build_splits(shares),
            policy=policy,
            description=description,
            created_at=datetime.now(),
        )

        shown = format_amount(amount, expense.currency, self.settings.minor_unit_exponent)
        logger.info(
            f"Prepared expense {expense_id!r}: {shown} split {policy.kind} "
            f"among {len(participants)} participants"
        )
        return expense

    def check_payment(
        self, group_id: str, from_member: MemberId, to_member: MemberId, amount: int
    ) -> PaymentCheck:
        """Validate a proposed payment against the group's current balances."""
        return validate_payment(
            from_member,
            to_member,
            amount,
            self.balances(group_id),
            tolerance=self.settings.payment_tolerance,
            settle_threshold=self.settings.settle_threshold,
        )
