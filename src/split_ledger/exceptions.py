"""Custom exceptions for split-ledger."""


class SplitLedgerError(Exception):
    """Base exception for all split-ledger errors."""

    pass


class ConfigurationError(SplitLedgerError):
    """Raised when configuration is invalid or missing."""

    pass


# ============================================================================
# Validation errors (malformed caller input)
# ============================================================================


class ValidationError(SplitLedgerError):
    """Base class for rejected caller input."""

    pass


class InvalidParticipantCount(ValidationError):
    """Raised when an amount is distributed over fewer than one slot."""

    def __init__(self, count: int):
        self.count = count
        super().__init__(f"Cannot distribute an amount over {count} participants")


class NonPositiveAmount(ValidationError):
    """Raised when an expense or payment amount is zero or negative."""

    def __init__(self, amount: int):
        self.amount = amount
        super().__init__(f"Amount must be positive, got {amount}")


class EmptyParticipantSet(ValidationError):
    """Raised when an expense is split among nobody."""

    def __init__(self, message: str | None = None):
        super().__init__(message or "At least one participant is required")


class DuplicateParticipant(ValidationError):
    """Raised when the same member appears twice in a participant list."""

    def __init__(self, member_id: str):
        self.member_id = member_id
        super().__init__(f"Participant {member_id!r} is listed more than once")


class UnknownMember(ValidationError):
    """Raised when a member id is not part of the relevant member set."""

    def __init__(self, member_id: str, message: str | None = None):
        self.member_id = member_id
        super().__init__(message or f"Member {member_id!r} is not in this group")


class SplitTotalMismatch(ValidationError):
    """Raised when caller-supplied shares don't add up to the expense amount."""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Split amounts sum to {actual}, expected {expected} "
            f"(off by {actual - expected})"
        )


class PercentageTotalMismatch(ValidationError):
    """Raised when split percentages don't add up to 100."""

    def __init__(self, total):
        self.total = total
        super().__init__(f"Percentages must sum to 100, got {total}")


class MissingShare(ValidationError):
    """Raised when a participant has no entry in an exact or percentage split."""

    def __init__(self, member_id: str):
        self.member_id = member_id
        super().__init__(f"No share given for participant {member_id!r}")


class NegativeShare(ValidationError):
    """Raised when a split entry is negative."""

    def __init__(self, member_id: str, value):
        self.member_id = member_id
        self.value = value
        super().__init__(f"Share for {member_id!r} cannot be negative: {value}")


class SelfPaymentError(ValidationError):
    """Raised when a member tries to pay themselves."""

    def __init__(self, member_id: str):
        self.member_id = member_id
        super().__init__(f"Member {member_id!r} cannot pay themselves")


class NoDebtOwed(ValidationError):
    """Raised when the paying member doesn't owe anything in the group."""

    def __init__(self, member_id: str, balance: int):
        self.member_id = member_id
        self.balance = balance
        super().__init__(
            f"Member {member_id!r} does not owe anything (balance: {balance})"
        )


class NoCreditDue(ValidationError):
    """Raised when the receiving member isn't owed anything in the group."""

    def __init__(self, member_id: str, balance: int):
        self.member_id = member_id
        self.balance = balance
        super().__init__(
            f"Member {member_id!r} is not owed anything (balance: {balance})"
        )


# ============================================================================
# Integrity violations (ledger data broke a conservation contract)
# ============================================================================


class IntegrityViolation(SplitLedgerError):
    """Raised when ledger data violates the split-sum or sum-to-zero contract."""

    pass


class UnbalancedLedger(IntegrityViolation):
    """Raised when balances handed to the simplifier don't sum to zero."""

    def __init__(self, total: int):
        self.total = total
        super().__init__(f"Balances must sum to zero, got {total}")


class CurrencyMismatch(IntegrityViolation):
    """Raised when records in different currencies are folded together."""

    def __init__(self, expected: str, actual: str, record_id: str):
        self.expected = expected
        self.actual = actual
        self.record_id = record_id
        super().__init__(
            f"Record {record_id!r} is in {actual}, but the ledger is in {expected}"
        )


# ============================================================================
# Conflicts (request is well-formed but contradicts current obligations)
# ============================================================================


class ConflictError(SplitLedgerError):
    """Base class for requests that conflict with outstanding obligations."""

    pass


class PaymentExceedsDebt(ConflictError):
    """Raised when a proposed payment is larger than the debt it settles."""

    def __init__(self, from_member: str, to_member: str, amount: int, outstanding: int):
        self.from_member = from_member
        self.to_member = to_member
        self.amount = amount
        self.outstanding = outstanding
        super().__init__(
            f"Payment of {amount} from {from_member!r} to {to_member!r} exceeds "
            f"outstanding debt of {outstanding}"
        )
