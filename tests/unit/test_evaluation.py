# tests/unit/test_evaluation.py
import math

import pytest

from portfolio_ledger_engine.diagnostics import DiagnosticsReporter
from portfolio_ledger_engine.enums import EvalType
from portfolio_ledger_engine.evaluation import calculate_annualized_returns, evaluate_portfolio
from portfolio_ledger_engine.exceptions import InsufficientSharesError, MissingQuoteError
from portfolio_ledger_engine.logging_utils import replay_id_var
from portfolio_ledger_engine.models.quote import QuoteItem
from portfolio_ledger_engine.operations import Buy, Sell, StockSplit
from portfolio_ledger_engine.repositories import ApplicationRepository

APPLE_ISIN = "US0378331005"
MICROSOFT_ISIN = "US5949181045"
UNKNOWN_ISIN = "DE0005140008"


@pytest.fixture
def appdata() -> ApplicationRepository:
    """
    Apple gains 10% over exactly one year, Microsoft is open without any quote and the
    Deutsche Bank ledger has no security master entry.
    """
    return ApplicationRepository.from_dict({
        "securities": [
            {"isin": MICROSOFT_ISIN, "nsin": "870747", "name": "Microsoft Corp.",
             "country": "United States", "countryCode": "US", "currency": "USD"},
            {"isin": APPLE_ISIN, "nsin": "865985", "name": "Apple Inc.",
             "country": "United States", "countryCode": "US", "currency": "USD"},
        ],
        "quotes": {
            APPLE_ISIN: [{"date": "2023-06-30", "price": 10.5}, {"date": "2024-01-01", "price": 11}],
        },
        "operations": {
            APPLE_ISIN: [{"operationType": "BUY", "date": "2023-01-01", "shares": 10, "pricePerShare": 10}],
            MICROSOFT_ISIN: [{"operationType": "BUY", "date": "2023-03-01", "shares": 5, "pricePerShare": 200, "fees": 1}],
            UNKNOWN_ISIN: [{"operationType": "BUY", "date": "2023-03-01", "shares": 5, "pricePerShare": 20}],
        },
    })


def test_annualized_returns_of_open_position():
    operations = [Buy("2023-01-01", 10, 10)]
    quote = QuoteItem(date="2024-01-01", price=11)

    assert calculate_annualized_returns(EvalType.GROSS, operations, quote) == pytest.approx(0.10, abs=1e-6)


def test_annualized_returns_net_of_fees():
    operations = [Buy("2023-01-01", 10, 10, 10), Sell("2024-01-01", 10, 11)]

    gross = calculate_annualized_returns(EvalType.GROSS, operations)
    net = calculate_annualized_returns(EvalType.NET, operations)

    assert gross == pytest.approx(0.10, abs=1e-6)
    assert net == pytest.approx(0.0, abs=1e-6)


def test_annualized_returns_follow_splits():
    operations = [Buy("2023-01-01", 10, 10), StockSplit("2023-06-01", 2), Sell("2024-01-01", 20, 5.5)]

    assert calculate_annualized_returns(EvalType.GROSS, operations) == pytest.approx(0.10, abs=1e-6)


def test_annualized_returns_reject_oversold_ledger():
    with pytest.raises(InsufficientSharesError):
        calculate_annualized_returns(EvalType.NET, [Buy("2023-01-01", 1, 10), Sell("2023-02-01", 2, 10)], isin=APPLE_ISIN)


def test_annualized_returns_require_quote_for_open_shares():
    with pytest.raises(MissingQuoteError, match=APPLE_ISIN):
        calculate_annualized_returns(EvalType.NET, [Buy("2023-01-01", 1, 10)], isin=APPLE_ISIN)


def test_evaluate_portfolio(appdata: ApplicationRepository):
    result = evaluate_portfolio(appdata)

    assert [h.name for h in result.holdings] == ["Apple Inc.", "Microsoft Corp."]
    apple, microsoft = result.holdings
    assert apple.xirr_gross == pytest.approx(0.10, abs=1e-6)
    assert apple.xirr_net == pytest.approx(0.10, abs=1e-6)
    assert apple.latest_quote_price == 11
    assert apple.latest_quote_date == "2024-01-01"
    assert microsoft.xirr_gross is None
    assert microsoft.xirr_net is None

    assert result.evaluation_date == "2024-01-01"
    assert result.active_holdings == 2
    assert result.current_value == pytest.approx(110)
    assert result.total_cost_basis == pytest.approx(1101)
    assert result.total_fees == pytest.approx(1)
    assert result.xirr_gross is not None
    assert result.xirr_net is not None

    subjects = {diagnostic.subject for diagnostic in result.diagnostics}
    assert subjects == {MICROSOFT_ISIN, UNKNOWN_ISIN}


def test_evaluate_portfolio_on_explicit_date(appdata: ApplicationRepository):
    result = evaluate_portfolio(appdata, evaluation_date="2024-06-30")

    assert result.evaluation_date == "2024-06-30"


def test_evaluate_portfolio_resets_replay_id(appdata: ApplicationRepository):
    before = replay_id_var.get()

    evaluate_portfolio(appdata)

    assert replay_id_var.get() == before


def test_evaluate_empty_application_data():
    result = evaluate_portfolio(ApplicationRepository.from_dict({}))

    assert result.holdings == []
    assert result.evaluation_date is None
    assert result.xirr_gross is None
    assert result.diagnostics == []


def test_annualized_returns_of_split_only_ledger_are_nan():
    """A split moves no money, so there is nothing to annualize."""
    reporter = DiagnosticsReporter()

    rate = calculate_annualized_returns(EvalType.NET, [StockSplit("2023-01-01", 4)], isin=APPLE_ISIN, reporter=reporter)

    assert math.isnan(rate)
    assert reporter.has_diagnostics_for(APPLE_ISIN)


def test_evaluate_portfolio_with_split_only_ledger():
    appdata = ApplicationRepository.from_dict({
        "securities": [
            {"isin": APPLE_ISIN, "nsin": "865985", "name": "Apple Inc.",
             "country": "United States", "countryCode": "US", "currency": "USD"},
        ],
        "operations": {
            APPLE_ISIN: [{"operationType": "SPLIT", "date": "2023-01-01", "splitRatio": 4}],
        },
    })

    result = evaluate_portfolio(appdata)

    assert len(result.holdings) == 1
    apple = result.holdings[0]
    assert apple.shares == 0
    assert apple.xirr_gross is None
    assert apple.xirr_net is None
    assert result.xirr_gross is None
    assert result.xirr_net is None
    subjects = {diagnostic.subject for diagnostic in result.diagnostics}
    assert subjects == {APPLE_ISIN, "PORTFOLIO"}
