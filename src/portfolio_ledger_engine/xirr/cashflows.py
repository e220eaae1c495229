# src/portfolio_ledger_engine/xirr/cashflows.py
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from ..dateutils import DateLike, compare_normalized_dates, normalize_date
from ..enums import EvalType, OperationType
from ..exceptions import InvalidArgumentError, MissingQuoteError
from ..math_utils import is_effectively_zero
from ..models.quote import QuoteItem
from ..operations import Operation
from ..repositories import OperationRepository
from ..sorted_list import SortedList


@dataclass(frozen=True)
class CashFlow:
    """
    A dated, signed amount of money: negative when money is spent, positive when it is
    received.
    """
    date: datetime
    amount: float

    def __post_init__(self):
        object.__setattr__(self, "date", normalize_date(self.date))


def _compare_cashflows(a: CashFlow, b: CashFlow) -> int:
    return compare_normalized_dates(a.date, b.date)


def _new_cashflow_list() -> SortedList[CashFlow]:
    return SortedList(_compare_cashflows)


def _to_cashflow_amount(operation: Operation, eval_type: EvalType) -> Optional[float]:
    net = EvalType(eval_type) is EvalType.NET
    if operation.operation_type is OperationType.BUY:
        return -operation.shares * operation.price_per_share - (operation.fees if net else 0.0)
    if operation.operation_type is OperationType.SELL:
        return operation.shares * operation.price_per_share - (operation.fees + operation.taxes if net else 0.0)
    if operation.operation_type is OperationType.DIVIDEND:
        return operation.get_dividend(eval_type)
    # splits move no money
    return None


def convert_operations(operations: Iterable[Operation], eval_type: EvalType) -> SortedList[CashFlow]:
    """
    Turns a security's operations into date-ordered cash flows.

    Raises:
        InvalidArgumentError: if there are no operations.
    """
    operation_list = list(operations)
    if not operation_list:
        raise InvalidArgumentError("Operations list cannot be empty.")

    cashflows = _new_cashflow_list()
    for operation in operation_list:
        amount = _to_cashflow_amount(operation, eval_type)
        if amount is not None:
            cashflows.add(CashFlow(operation.date, amount))
    return cashflows


def get_cashflows_for_holding(
    operations: Iterable[Operation],
    eval_type: EvalType,
    current_shares: float = 0.0,
    current_quote: Optional[QuoteItem] = None,
) -> SortedList[CashFlow]:
    """
    Cash flows of one holding, closed by the market value of the open shares at the
    latest quote.

    Raises:
        MissingQuoteError: if shares are still open but no quote is available.
    """
    cashflows = convert_operations(operations, eval_type)

    if current_shares > 0 and not is_effectively_zero(current_shares):
        if current_quote is None:
            raise MissingQuoteError()
        cashflows.add(CashFlow(current_quote.date, current_shares * current_quote.price))

    return cashflows


def get_cashflows_for_portfolio(
    operation_repository: OperationRepository,
    eval_type: EvalType,
    current_value: float,
    current_date: DateLike,
) -> SortedList[CashFlow]:
    """All holdings' cash flows merged by date, closed by the current portfolio value."""
    cashflows = _new_cashflow_list()
    for _, operations in operation_repository.items():
        if not operations:
            continue
        for cashflow in convert_operations(operations, eval_type):
            cashflows.add(cashflow)

    cashflows.add(CashFlow(current_date, current_value))
    return cashflows
