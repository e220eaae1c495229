# src/portfolio_ledger_engine/enums.py
from enum import Enum

from .constants import (
    OPERATION_TYPE_BUY,
    OPERATION_TYPE_DIVIDEND,
    OPERATION_TYPE_SELL,
    OPERATION_TYPE_SPLIT,
)


class OperationType(str, Enum):
    """Discriminant of a ledger operation, as persisted in the operation records."""
    BUY = OPERATION_TYPE_BUY
    SELL = OPERATION_TYPE_SELL
    SPLIT = OPERATION_TYPE_SPLIT
    DIVIDEND = OPERATION_TYPE_DIVIDEND


class EvalType(str, Enum):
    """Whether fees and taxes are deducted from cash flows (NET) or ignored (GROSS)."""
    NET = "net"
    GROSS = "gross"
