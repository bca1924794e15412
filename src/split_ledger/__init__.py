"""split-ledger - Balance and settlement engine for shared group expenses."""

__version__ = "0.1.0"

from .config import Settings, load_settings
from .ledger import compute_balances, compute_member_totals, summarize_member
from .models import (
    CustomSplit,
    Debt,
    EqualSplit,
    ExactSplit,
    Expense,
    GroupSnapshot,
    Member,
    MemberSummary,
    Payment,
    PaymentCheck,
    PercentageSplit,
    Split,
    SplitPolicy,
)
from .money import distribute_evenly, format_amount, to_minor_units
from .payments import validate_payment
from .service import LedgerService, LedgerSource
from .simplifier import compute_settlement_plan, verify_settlement_plan
from .splits import calculate_split

__all__ = [
    "Settings",
    "load_settings",
    "compute_balances",
    "compute_member_totals",
    "summarize_member",
    "CustomSplit",
    "Debt",
    "EqualSplit",
    "ExactSplit",
    "Expense",
    "GroupSnapshot",
    "Member",
    "MemberSummary",
    "Payment",
    "PaymentCheck",
    "PercentageSplit",
    "Split",
    "SplitPolicy",
    "distribute_evenly",
    "format_amount",
    "to_minor_units",
    "validate_payment",
    "LedgerService",
    "LedgerSource",
    "compute_settlement_plan",
    "verify_settlement_plan",
    "calculate_split",
]
