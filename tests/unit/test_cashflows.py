# tests/unit/test_cashflows.py
from datetime import datetime, timezone

import pytest

from portfolio_ledger_engine.enums import EvalType
from portfolio_ledger_engine.exceptions import InvalidArgumentError, MissingQuoteError
from portfolio_ledger_engine.models.quote import QuoteItem
from portfolio_ledger_engine.operations import Buy, Dividend, Sell, StockSplit
from portfolio_ledger_engine.repositories import OperationRepository
from portfolio_ledger_engine.xirr.cashflows import (
    CashFlow,
    convert_operations,
    get_cashflows_for_holding,
    get_cashflows_for_portfolio,
)


@pytest.fixture
def operations() -> list:
    return [
        Buy("2024-01-10", 10, 100, 5),
        StockSplit("2024-02-10", 2),
        Dividend("2024-03-10", 0.25, 20, 1, 1),
        Sell("2024-04-10", 10, 60, 2, 3),
    ]


def test_convert_operations_net(operations: list):
    cashflows = convert_operations(operations, EvalType.NET)

    assert [cf.amount for cf in cashflows] == pytest.approx([-1005, 4, 595])


def test_convert_operations_gross(operations: list):
    cashflows = convert_operations(operations, EvalType.GROSS)

    assert [cf.amount for cf in cashflows] == pytest.approx([-1000, 5, 600])
    assert cashflows.get(0).date == datetime(2024, 1, 10, tzinfo=timezone.utc)


def test_convert_operations_rejects_empty_input():
    with pytest.raises(InvalidArgumentError, match="cannot be empty"):
        convert_operations([], EvalType.NET)


def test_holding_cashflows_end_with_market_value(operations: list):
    quote = QuoteItem(date="2024-05-31", price=65)

    cashflows = get_cashflows_for_holding(operations, EvalType.NET, current_shares=10, current_quote=quote)

    assert len(cashflows) == 4
    assert cashflows.get(3) == CashFlow("2024-05-31", 650)


def test_closed_holding_needs_no_quote(operations: list):
    cashflows = get_cashflows_for_holding(operations, EvalType.NET)

    assert len(cashflows) == 3


def test_open_holding_without_quote_is_a_hard_failure(operations: list):
    with pytest.raises(MissingQuoteError):
        get_cashflows_for_holding(operations, EvalType.NET, current_shares=10)


def test_portfolio_cashflows_merge_all_holdings_by_date():
    repo = OperationRepository()
    repo.add("US0378331005", Buy("2024-01-10", 10, 100))
    repo.add("US0378331005", Sell("2024-03-10", 5, 110))
    repo.add("US5949181045", Buy("2024-02-10", 1, 400, 1))

    cashflows = get_cashflows_for_portfolio(repo, EvalType.NET, 950.0, datetime(2024, 6, 30, 18, 0))

    assert [cf.amount for cf in cashflows] == pytest.approx([-1000, -401, 550, 950])
    assert cashflows.get(3).date == datetime(2024, 6, 30, tzinfo=timezone.utc)
