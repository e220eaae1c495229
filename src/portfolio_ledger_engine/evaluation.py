# src/portfolio_ledger_engine/evaluation.py
import logging
import math
from datetime import datetime
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from .constants import FLOATING_POINT_TOLERANCE
from .dateutils import DateLike, format_normalized_date, normalize_date
from .diagnostics import Diagnostic, DiagnosticsReporter
from .enums import EvalType, OperationType
from .exceptions import InsufficientSharesError, MissingQuoteError
from .holding import Holding
from .logging_utils import generate_replay_id, replay_id_var
from .math_utils import is_effectively_zero
from .models.quote import QuoteItem
from .operations import Operation
from .portfolio import Portfolio
from .repositories import ApplicationRepository, OperationRepository
from .xirr import XIRRCalculator, get_cashflows_for_holding, get_cashflows_for_portfolio

logger = logging.getLogger(__name__)


class HoldingEvaluation(BaseModel):
    isin: str = Field(..., description="ISIN of the evaluated security")
    name: str = Field(..., description="Display name of the security")
    shares: float = Field(..., description="Shares currently held")
    total_cost_basis: float = Field(..., description="Money paid for the held shares, fees included")
    average_price_per_share: float
    total_realized_gains: float
    total_dividends: float
    dividend_taxes: float
    latest_quote_price: Optional[float] = None
    latest_quote_date: Optional[str] = None
    xirr_gross: Optional[float] = Field(None, description="Annualized return ignoring fees and taxes")
    xirr_net: Optional[float] = Field(None, description="Annualized return after fees and taxes")


class PortfolioEvaluation(BaseModel):
    """
    Result of a portfolio evaluation run. Figures that could not be computed are None and
    come with an entry in `diagnostics`.
    """
    evaluation_date: Optional[str] = None
    holdings: list[HoldingEvaluation] = Field(default_factory=list)
    active_holdings: int = 0
    total_cost_basis: float = 0.0
    total_fees: float = 0.0
    total_realized_gains: float = 0.0
    total_dividends: float = 0.0
    total_dividend_taxes: float = 0.0
    current_value: float = 0.0
    xirr_gross: Optional[float] = None
    xirr_net: Optional[float] = None
    diagnostics: list[Diagnostic] = Field(default_factory=list)


def calculate_annualized_returns(
    eval_type: EvalType,
    operations: Iterable[Operation],
    latest_quote: Optional[QuoteItem] = None,
    isin: str = "",
    reporter: Optional[DiagnosticsReporter] = None,
) -> float:
    """
    XIRR of a single security's ledger, valuing open shares at the latest quote.

    Raises:
        InsufficientSharesError: if the ledger sells more shares than it bought.
        MissingQuoteError: if shares remain open and no quote is available.

    A ledger that moves no money, e.g. a lone stock split, yields NaN.
    """
    operation_list = list(operations)

    shares = 0.0
    for operation in operation_list:
        if operation.operation_type is OperationType.BUY:
            shares += operation.shares
        elif operation.operation_type is OperationType.SELL:
            if operation.shares - shares > FLOATING_POINT_TOLERANCE:
                raise InsufficientSharesError(isin=isin, requested_shares=operation.shares, available_shares=shares)
            shares -= operation.shares
        elif operation.operation_type is OperationType.SPLIT:
            shares *= operation.split_ratio

    if is_effectively_zero(shares):
        shares = 0.0
    elif latest_quote is None:
        raise MissingQuoteError(f"Current quote cannot be missing if shares are held (ISIN: {isin}).")

    subject = isin or "XIRR"
    cashflows = get_cashflows_for_holding(operation_list, eval_type, shares, latest_quote)
    if not cashflows:
        _report_not_computable(reporter, subject, "no cash flows in the ledger")
        return math.nan
    return XIRRCalculator().compute_xirr(cashflows, reporter, subject=subject)


def _report_not_computable(reporter: Optional[DiagnosticsReporter], subject: str, cause: str) -> None:
    reason = f"XIRR not computed: {cause}."
    if reporter is not None:
        reporter.add(subject, reason)
    else:
        logger.warning(f"{subject}: {reason}")


def _as_optional_rate(rate: float) -> Optional[float]:
    return None if math.isnan(rate) else rate


def _evaluate_holding(
    holding: Holding,
    operations: list[Operation],
    latest_quote: Optional[QuoteItem],
    reporter: DiagnosticsReporter,
) -> HoldingEvaluation:
    evaluation = HoldingEvaluation(
        isin=holding.isin,
        name=holding.security.name,
        shares=holding.shares,
        total_cost_basis=holding.total_cost_basis,
        average_price_per_share=holding.average_price_per_share,
        total_realized_gains=holding.total_realized_gains,
        total_dividends=holding.total_dividends,
        dividend_taxes=holding.dividend_taxes,
        latest_quote_price=latest_quote.price if latest_quote else None,
        latest_quote_date=format_normalized_date(latest_quote.date) if latest_quote else None,
    )

    try:
        evaluation.xirr_gross = _as_optional_rate(
            calculate_annualized_returns(EvalType.GROSS, operations, latest_quote, holding.isin, reporter))
        evaluation.xirr_net = _as_optional_rate(
            calculate_annualized_returns(EvalType.NET, operations, latest_quote, holding.isin, reporter))
    except MissingQuoteError as e:
        reporter.add(holding.isin, f"XIRR not computed: {e.message}")

    return evaluation


def _resolve_evaluation_date(
    appdata: ApplicationRepository,
    restricted_operations: OperationRepository,
) -> Optional[datetime]:
    quote_dates = [quote.date for quote in appdata.quotes.get_all_latest_quotes().values() if quote is not None]
    if quote_dates:
        return max(quote_dates)
    operation_dates = [op.date for _, ops in restricted_operations.items() for op in ops]
    return max(operation_dates) if operation_dates else None


def evaluate_portfolio(
    appdata: ApplicationRepository,
    evaluation_date: Optional[DateLike] = None,
) -> PortfolioEvaluation:
    """
    Reconstructs the portfolio from the application data and evaluates every holding.

    The portfolio-wide XIRR closes the merged cash flows of all known securities with the
    current value on `evaluation_date`, which defaults to the most recent quote day.
    """
    token = replay_id_var.set(generate_replay_id("EVAL"))
    try:
        reporter = DiagnosticsReporter()
        portfolio = Portfolio.from_application_data(appdata, reporter)
        latest_quotes = appdata.quotes.get_all_latest_quotes()

        holdings = sorted(portfolio.get_all_holdings(), key=lambda h: h.security.name)
        evaluations = [
            _evaluate_holding(holding, appdata.operations.get(holding.isin).to_list(), latest_quotes.get(holding.isin), reporter)
            for holding in holdings
        ]

        # only securities known to the security master take part in the portfolio flows
        restricted_operations = OperationRepository()
        for holding in holdings:
            for operation in appdata.operations.get(holding.isin):
                restricted_operations.add(holding.isin, operation)

        current_value = portfolio.get_current_value(latest_quotes)
        if evaluation_date is not None:
            resolved_date = normalize_date(evaluation_date)
        else:
            resolved_date = _resolve_evaluation_date(appdata, restricted_operations)

        result = PortfolioEvaluation(
            evaluation_date=format_normalized_date(resolved_date) if resolved_date else None,
            holdings=evaluations,
            active_holdings=len(portfolio.get_active_holdings()),
            total_cost_basis=portfolio.total_cost_basis,
            total_fees=portfolio.total_fees,
            total_realized_gains=portfolio.total_realized_gains,
            total_dividends=portfolio.total_dividends,
            total_dividend_taxes=portfolio.total_dividend_taxes,
            current_value=current_value,
        )

        if holdings and resolved_date is not None:
            calculator = XIRRCalculator()
            for eval_type in EvalType:
                cashflows = get_cashflows_for_portfolio(restricted_operations, eval_type, current_value, resolved_date)
                # the terminal value alone carries no return
                if len(cashflows) < 2:
                    _report_not_computable(reporter, "PORTFOLIO", "no cash flows besides the current value")
                    continue
                rate = _as_optional_rate(calculator.compute_xirr(cashflows, reporter, subject="PORTFOLIO"))
                setattr(result, f"xirr_{eval_type.value}", rate)

        result.diagnostics = reporter.get_diagnostics()
        logger.info(
            f"Evaluated {len(evaluations)} holdings; current value {current_value:.2f}, "
            f"{len(result.diagnostics)} diagnostics."
        )
        return result
    finally:
        replay_id_var.reset(token)
