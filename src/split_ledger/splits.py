"""Split calculation: one expense amount + a split policy -> per-member amounts."""

import logging
from collections.abc import Iterable, Mapping, Sequence
from decimal import Decimal

from .exceptions import (
    DuplicateParticipant,
    EmptyParticipantSet,
    IntegrityViolation,
    MissingShare,
    NegativeShare,
    NonPositiveAmount,
    PercentageTotalMismatch,
    SplitTotalMismatch,
    UnknownMember,
)
from .models import (
    CustomSplit,
    EqualSplit,
    Expense,
    ExactSplit,
    MemberId,
    PercentageSplit,
    Split,
    SplitPolicy,
)
from .money import distribute_evenly, round_half_up

logger = logging.getLogger(__name__)

DEFAULT_PERCENTAGE_TOLERANCE = Decimal("0.01")


def _check_participants(
    participants: Sequence[MemberId], members: Iterable[MemberId] | None
) -> None:
    if not participants:
        raise EmptyParticipantSet()

    seen: set[MemberId] = set()
    for member_id in participants:
        if member_id in seen:
            raise DuplicateParticipant(member_id)
        seen.add(member_id)

    if members is not None:
        known = set(members)
        for member_id in participants:
            if member_id not in known:
                raise UnknownMember(member_id)


def _check_entries(
    entries: Mapping[MemberId, int | Decimal],
    participants: Sequence[MemberId],
    require_all: bool,
) -> None:
    """Entries must name participants only, be non-negative and, optionally, cover everyone."""
    participant_set = set(participants)
    for member_id, value in entries.items():
        if member_id not in participant_set:
            raise UnknownMember(
                member_id, f"Member {member_id!r} has a share but is not a participant"
            )
        if value < 0:
            raise NegativeShare(member_id, value)

    if require_all:
        for member_id in participants:
            if member_id not in entries:
                raise MissingShare(member_id)


def _split_exact(
    amount: int,
    participants: Sequence[MemberId],
    amounts: Mapping[MemberId, int],
    require_all: bool,
) -> dict[MemberId, int]:
    _check_entries(amounts, participants, require_all=require_all)

    shares = {member_id: amounts.get(member_id, 0) for member_id in participants}
    actual = sum(shares.values())
    if actual != amount:
        raise SplitTotalMismatch(expected=amount, actual=actual)
    return shares


def _split_percentage(
    amount: int,
    participants: Sequence[MemberId],
    percentages: Mapping[MemberId, Decimal],
    tolerance: Decimal,
) -> dict[MemberId, int]:
    """
    Compute percentage shares with residual adjustment.

    Steps:
    1. Round each share independently (half-up)
    2. Compute residual = amount - sum of shares
    3. Add the residual to the largest share (first one in participant order on ties)
    """
    _check_entries(percentages, participants, require_all=True)

    total_pct = sum((Decimal(pct) for pct in percentages.values()), Decimal("0"))
    if abs(total_pct - 100) > tolerance:
        raise PercentageTotalMismatch(total_pct)

    shares = {
        member_id: round_half_up(Decimal(amount) * Decimal(percentages[member_id]) / 100)
        for member_id in participants
    }

    residual = amount - sum(shares.values())
    if residual != 0:
        # max() returns the first maximal element, so ties go to input order
        largest = max(participants, key=lambda member_id: shares[member_id])
        shares[largest] += residual
        logger.debug(f"Applied rounding adjustment: {residual} to {largest!r}")

    return shares


def calculate_split(
    amount: int,
    participants: Sequence[MemberId],
    policy: SplitPolicy,
    members: Iterable[MemberId] | None = None,
    percentage_tolerance: Decimal = DEFAULT_PERCENTAGE_TOLERANCE,
) -> dict[MemberId, int]:
    """
    Divide an expense amount among its participants.

    The paying member may be a participant; their share is their own part of
    the expense and offsets the credit they receive as payer.

    Args:
        amount: Expense total in minor units
        participants: Participant ids, in the order shares should be assigned
        policy: Equal, exact, percentage or custom split policy
        members: Group member ids; when given, participants must belong to it
        percentage_tolerance: Allowed deviation of the percentage total from 100

    Returns:
        Mapping of participant id -> share, in participant order, summing to amount

    Raises:
        NonPositiveAmount: If amount <= 0
        EmptyParticipantSet: If there are no participants
        DuplicateParticipant: If a participant is listed twice
        UnknownMember: If a participant or share entry isn't a known member
        SplitTotalMismatch: If exact/custom amounts don't sum to the total
        PercentageTotalMismatch: If percentages don't sum to 100
    """
    if amount <= 0:
        raise NonPositiveAmount(amount)
    _check_participants(participants, members)

    if isinstance(policy, EqualSplit):
        shares = dict(zip(participants, distribute_evenly(amount, len(participants))))
    elif isinstance(policy, ExactSplit):
        shares = _split_exact(amount, participants, policy.amounts, require_all=True)
    elif isinstance(policy, CustomSplit):
        shares = _split_exact(amount, participants, policy.amounts, require_all=False)
    elif isinstance(policy, PercentageSplit):
        shares = _split_percentage(
            amount, participants, policy.percentages, percentage_tolerance
        )
    else:
        raise TypeError(f"Unsupported split policy: {type(policy).__name__}")

    # Final verification
    assert sum(shares.values()) == amount, "Split adjustment failed"

    return shares


def build_splits(shares: Mapping[MemberId, int]) -> tuple[Split, ...]:
    """Turn a share mapping into Split rows, keeping order."""
    return tuple(
        Split(member_id=member_id, amount=share) for member_id, share in shares.items()
    )


def validate_splits(expense: Expense) -> None:
    """
    Verify that an expense's splits add up to its amount.

    Raises:
        IntegrityViolation: If the split total differs from the expense amount
    """
    split_total = expense.split_total()
    if split_total != expense.amount:
        raise IntegrityViolation(
            f"Splits of expense {expense.id!r} sum to {split_total}, "
            f"but the expense amount is {expense.amount}"
        )
