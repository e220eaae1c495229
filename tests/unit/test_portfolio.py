# tests/unit/test_portfolio.py
import logging

import pytest

from portfolio_ledger_engine.diagnostics import DiagnosticsReporter
from portfolio_ledger_engine.exceptions import InsufficientSharesError
from portfolio_ledger_engine.models.quote import QuoteItem
from portfolio_ledger_engine.models.security import Security
from portfolio_ledger_engine.operations import Buy, Dividend, Sell, StockSplit
from portfolio_ledger_engine.portfolio import Portfolio
from portfolio_ledger_engine.repositories import (
    ApplicationRepository,
    OperationRepository,
    QuoteRepository,
    SecurityRepository,
)

APPLE_ISIN = "US0378331005"
MICROSOFT_ISIN = "US5949181045"
UNKNOWN_ISIN = "DE0005140008"


@pytest.fixture
def securities(apple: Security, microsoft: Security) -> SecurityRepository:
    return SecurityRepository.from_list([apple, microsoft])


@pytest.fixture
def operations() -> OperationRepository:
    """
    Apple: bought and split on the same day (20 shares open).
    Microsoft: bought twice and fully sold (position closed).
    """
    repo = OperationRepository()
    repo.add(APPLE_ISIN, Buy("2024-01-10", 10, 100, 5))
    repo.add(APPLE_ISIN, StockSplit("2024-01-10", 2))
    repo.add(APPLE_ISIN, Dividend("2024-02-10", 0.06, 20, 1, 0.01))
    repo.add(MICROSOFT_ISIN, Buy("2024-01-05", 10, 100, 5))
    repo.add(MICROSOFT_ISIN, Buy("2024-02-05", 10, 120, 5))
    repo.add(MICROSOFT_ISIN, Sell("2024-03-05", 20, 125, 5, 10))
    return repo


@pytest.fixture
def portfolio(securities: SecurityRepository, operations: OperationRepository) -> Portfolio:
    return Portfolio.reconstruct(securities, operations)


def test_reconstruct_replays_every_holding(portfolio: Portfolio):
    apple = portfolio.get_holding(APPLE_ISIN)
    microsoft = portfolio.get_holding(MICROSOFT_ISIN)

    assert apple.shares == 20
    assert apple.average_price_per_share == pytest.approx(50.25)
    assert microsoft.shares == 0
    assert microsoft.total_realized_gains == pytest.approx(275)
    assert len(portfolio) == 2


def test_active_holdings_exclude_closed_positions(portfolio: Portfolio):
    assert [holding.isin for holding in portfolio.get_active_holdings()] == [APPLE_ISIN]
    assert len(portfolio.get_all_holdings()) == 2


def test_portfolio_totals_sum_over_holdings(portfolio: Portfolio):
    assert portfolio.total_cost_basis == pytest.approx(1005)
    assert portfolio.total_fees == pytest.approx(5)
    assert portfolio.total_realized_gains == pytest.approx(275)
    assert portfolio.total_dividends == pytest.approx(1.2)
    assert portfolio.total_dividend_taxes == pytest.approx(0.01)
    assert not portfolio.reporter.has_diagnostics()


def test_unknown_securities_are_skipped_with_a_diagnostic(
    securities: SecurityRepository, operations: OperationRepository, caplog
):
    operations.add(UNKNOWN_ISIN, Buy("2024-01-10", 1, 10))
    reporter = DiagnosticsReporter()

    with caplog.at_level(logging.WARNING):
        portfolio = Portfolio.reconstruct(securities, operations, reporter)

    assert portfolio.get_holding(UNKNOWN_ISIN) is None
    assert len(portfolio) == 2
    assert reporter.has_diagnostics_for(UNKNOWN_ISIN)
    assert UNKNOWN_ISIN in caplog.text


def test_oversold_ledger_aborts_reconstruction(securities: SecurityRepository):
    operations = OperationRepository()
    operations.add(APPLE_ISIN, Sell("2024-01-10", 1, 10))

    with pytest.raises(InsufficientSharesError):
        Portfolio.reconstruct(securities, operations)


def test_current_value_uses_latest_quotes(portfolio: Portfolio):
    quotes = QuoteRepository()
    quotes.add(APPLE_ISIN, QuoteItem(date="2024-03-01", price=55))
    quotes.add(APPLE_ISIN, QuoteItem(date="2024-03-02", price=60))

    assert portfolio.get_current_value(quotes.get_all_latest_quotes()) == pytest.approx(1200)
    assert not portfolio.reporter.has_diagnostics()


def test_current_value_skips_holdings_without_quote(portfolio: Portfolio):
    assert portfolio.get_current_value({}) == 0
    assert portfolio.reporter.has_diagnostics_for(APPLE_ISIN)
    # closed positions need no quote
    assert not portfolio.reporter.has_diagnostics_for(MICROSOFT_ISIN)


def test_from_application_data(securities: SecurityRepository, operations: OperationRepository):
    appdata = ApplicationRepository(securities, QuoteRepository(), operations)

    portfolio = Portfolio.from_application_data(appdata)

    assert portfolio.total_realized_gains == pytest.approx(275)
    assert "Number of Active Holdings: 1 (plus 1 inactive)" in str(portfolio)
