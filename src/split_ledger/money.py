"""Integer minor-unit arithmetic and deterministic remainder distribution."""

from decimal import ROUND_HALF_UP, Decimal

from .exceptions import InvalidParticipantCount


def round_half_up(value: Decimal) -> int:
    """Round a Decimal to the nearest integer, halves away from zero."""
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def to_minor_units(amount: Decimal, exponent: int = 2) -> int:
    """
    Convert a Decimal amount in major units to integer minor units.
    Uses ROUND_HALF_UP for consistency.

    Args:
        amount: Amount in major units (e.g. dollars)
        exponent: Number of minor-unit digits (2 for cents)

    Returns:
        Amount in minor units (integer)
    """
    return round_half_up(amount * (Decimal(10) ** exponent))


def format_amount(amount: int, currency: str, exponent: int = 2) -> str:
    """
    Format minor units for display, e.g. ``format_amount(-1234, "USD")``
    gives ``"-USD 12.34"``.
    """
    sign = "-" if amount < 0 else ""
    major = Decimal(abs(amount)).scaleb(-exponent)
    return f"{sign}{currency} {major:.{exponent}f}"


def distribute_evenly(total: int, n: int) -> list[int]:
    """
    Split ``total`` into ``n`` integers that sum to exactly ``total``.

    Every entry is the truncated quotient, and the first ``abs(total) % n``
    entries carry one extra unit in the direction of ``total``'s sign.
    When ``n`` exceeds ``abs(total)`` the trailing entries are zero.

    Args:
        total: Amount in minor units (may be negative)
        n: Number of shares

    Returns:
        List of ``n`` shares in slot order

    Raises:
        InvalidParticipantCount: If n < 1
    """
    if n <= 0:
        raise InvalidParticipantCount(n)

    sign = -1 if total < 0 else 1
    base, remainder = divmod(abs(total), n)
    return [sign * (base + 1)] * remainder + [sign * base] * (n - remainder)
