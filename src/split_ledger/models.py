"""Pydantic domain models for split-ledger.

All amounts are integers in the currency's minor unit (cents for USD).
Models are frozen: the engine reads snapshots, it never edits them.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

MemberId = str
Balances = dict[MemberId, int]

PaymentStatus = Literal["pending", "completed", "cancelled"]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ============================================================================
# Split Policies
# ============================================================================


class EqualSplit(_Frozen):
    """Divide the amount evenly; the first participants absorb the remainder."""

    kind: Literal["equal"] = "equal"


class ExactSplit(_Frozen):
    """Every participant has a fixed amount; amounts must sum to the total."""

    kind: Literal["exact"] = "exact"
    amounts: dict[MemberId, int]


class PercentageSplit(_Frozen):
    """Every participant has a percentage; percentages must sum to 100."""

    kind: Literal["percentage"] = "percentage"
    percentages: dict[MemberId, Decimal]


class CustomSplit(_Frozen):
    """Like ExactSplit, but participants without an entry owe nothing."""

    kind: Literal["custom"] = "custom"
    amounts: dict[MemberId, int]


SplitPolicy = Annotated[
    EqualSplit | ExactSplit | PercentageSplit | CustomSplit,
    Field(discriminator="kind"),
]


# ============================================================================
# Ledger Records
# ============================================================================


class Member(_Frozen):
    """A member of a group."""

    id: MemberId
    name: str


class Split(_Frozen):
    """One member's share of an expense."""

    member_id: MemberId
    amount: int = Field(ge=0)


class Expense(_Frozen):
    """A committed shared expense and its splits."""

    id: str
    group_id: str
    amount: int = Field(gt=0)
    currency: str
    paid_by: MemberId
    splits: tuple[Split, ...]
    policy: SplitPolicy | None = None  # how the splits were produced, for audit
    description: str = ""
    created_at: datetime = Field(default_factory=datetime.now)

    def split_total(self) -> int:
        """Sum of all split amounts."""
        return sum(split.amount for split in self.splits)


class Payment(_Frozen):
    """A recorded settlement payment between two members."""

    id: str
    group_id: str
    from_member: MemberId
    to_member: MemberId
    amount: int = Field(gt=0)
    currency: str
    status: PaymentStatus = "completed"
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def is_completed(self) -> bool:
        return self.status == "completed"


class GroupSnapshot(_Frozen):
    """Everything the engine needs to know about one group at one point in time."""

    group_id: str
    currency: str
    members: tuple[Member, ...]
    expenses: tuple[Expense, ...] = ()
    payments: tuple[Payment, ...] = ()

    def member_ids(self) -> list[MemberId]:
        """Member ids in group order."""
        return [member.id for member in self.members]

    def completed_payments(self) -> list[Payment]:
        """Payments that count towards balances."""
        return [payment for payment in self.payments if payment.is_completed]


# ============================================================================
# Derived Values
# ============================================================================


class Debt(_Frozen):
    """A recommended payment in a settlement plan."""

    from_member: MemberId
    to_member: MemberId
    amount: int = Field(ge=1)


class MemberSummary(_Frozen):
    """One member's position in a group, with the plan edges that involve them."""

    member_id: MemberId
    total_paid: int  # sum of expenses this member paid for
    total_owed: int  # sum of this member's splits
    payments_sent: int
    payments_received: int
    net_balance: int
    to_pay: tuple[Debt, ...] = ()
    to_receive: tuple[Debt, ...] = ()

    @property
    def amount_owed(self) -> int:
        """What this member still owes, or 0."""
        return -self.net_balance if self.net_balance < 0 else 0

    @property
    def amount_due(self) -> int:
        """What this member is still owed, or 0."""
        return self.net_balance if self.net_balance > 0 else 0


class PaymentCheck(_Frozen):
    """An accepted payment proposal."""

    from_member: MemberId
    to_member: MemberId
    amount: int
    outstanding: int  # planned debt between the pair before this payment
