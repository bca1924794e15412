"""Parsing of storage records into ledger models.

Storage hands over plain mappings shaped like:

- expense: ``{id, amount, currency, paidBy, splits: [{member, amount}], timestamp}``
- completed payment: ``{from, to, amount, currency, timestamp}``
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from .models import Expense, Payment, Split


def parse_timestamp(value: Any) -> datetime:
    """Accept datetimes or ISO-8601 strings (with a trailing ``Z``)."""
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def parse_expense(group_id: str, data: Mapping[str, Any]) -> Expense:
    """Build an Expense from a storage record."""
    splits = tuple(
        Split(member_id=str(split_data["member"]), amount=int(split_data["amount"]))
        for split_data in data.get("splits", [])
    )

    return Expense(
        id=str(data["id"]),
        group_id=group_id,
        amount=int(data["amount"]),
        currency=data["currency"],
        paid_by=str(data["paidBy"]),
        splits=splits,
        description=data.get("description", ""),
        created_at=parse_timestamp(data["timestamp"]),
    )


def parse_completed_payment(
    group_id: str, data: Mapping[str, Any], index: int = 0
) -> Payment:
    """
    Build a completed Payment from a storage record.

    Records from ``list_completed_payments`` are already filtered to completed
    and may not carry an id; ``index`` makes a stable fallback id.
    """
    return Payment(
        id=str(data.get("id", f"{group_id}-payment-{index}")),
        group_id=group_id,
        from_member=str(data["from"]),
        to_member=str(data["to"]),
        amount=int(data["amount"]),
        currency=data["currency"],
        status="completed",
        created_at=parse_timestamp(data["timestamp"]),
    )
