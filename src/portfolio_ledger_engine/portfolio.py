# src/portfolio_ledger_engine/portfolio.py
import logging
from typing import TYPE_CHECKING, Mapping, Optional

from .diagnostics import DiagnosticsReporter
from .holding import Holding
from .models.quote import QuoteItem
from .repositories import OperationRepository, SecurityRepository

if TYPE_CHECKING:
    from .repositories import ApplicationRepository

logger = logging.getLogger(__name__)


class Portfolio:
    """
    All holdings of the investor, rebuilt from the operation ledger on every run.

    Ledger entries of securities missing from the security master are skipped and
    reported, so that partial data sets can still be evaluated.
    """

    @classmethod
    def reconstruct(
        cls,
        securities: SecurityRepository,
        operations: OperationRepository,
        reporter: Optional[DiagnosticsReporter] = None,
    ) -> "Portfolio":
        portfolio = cls(reporter)
        for isin, ledger in operations.items():
            if not ledger:
                continue
            security = securities.get_by("isin", isin)
            if security is None:
                portfolio.reporter.add(isin, "Security not found in the security master; its operations are ignored.")
                continue
            portfolio._holdings[isin] = Holding.from_operations(security, ledger)

        logger.info(f"Reconstructed portfolio with {len(portfolio._holdings)} holdings.")
        return portfolio

    @classmethod
    def from_application_data(
        cls,
        appdata: "ApplicationRepository",
        reporter: Optional[DiagnosticsReporter] = None,
    ) -> "Portfolio":
        return cls.reconstruct(appdata.securities, appdata.operations, reporter)

    def __init__(self, reporter: Optional[DiagnosticsReporter] = None):
        self._holdings: dict[str, Holding] = {}
        self.reporter = reporter if reporter is not None else DiagnosticsReporter()

    def get_holding(self, isin: str) -> Optional[Holding]:
        return self._holdings.get(isin)

    def get_all_holdings(self) -> list[Holding]:
        return list(self._holdings.values())

    def get_active_holdings(self) -> list[Holding]:
        return [holding for holding in self._holdings.values() if holding.is_active]

    @property
    def total_cost_basis(self) -> float:
        return sum(holding.total_cost_basis for holding in self._holdings.values())

    @property
    def total_fees(self) -> float:
        return sum(holding.total_fees for holding in self._holdings.values())

    @property
    def total_realized_gains(self) -> float:
        return sum(holding.total_realized_gains for holding in self._holdings.values())

    @property
    def total_dividends(self) -> float:
        return sum(holding.total_dividends for holding in self._holdings.values())

    @property
    def total_dividend_taxes(self) -> float:
        return sum(holding.dividend_taxes for holding in self._holdings.values())

    def get_current_value(self, latest_quotes: Mapping[str, Optional[QuoteItem]]) -> float:
        """
        Market value of all open positions at their latest quotes.

        An open position without a quote is left out of the sum and reported; it never
        counts as zero-valued silently.
        """
        current_value = 0.0
        for holding in self.get_active_holdings():
            quote = latest_quotes.get(holding.isin)
            if quote is None:
                self.reporter.add(holding.isin, "No quote available; holding excluded from the current value.")
                continue
            current_value += holding.shares * quote.price
        return current_value

    def __len__(self) -> int:
        return len(self._holdings)

    def __str__(self) -> str:
        active_count = len(self.get_active_holdings())
        return (
            f"-> Number of Active Holdings: {active_count} (plus {len(self._holdings) - active_count} inactive)\n"
            f"   Total Cost Basis: {self.total_cost_basis:.2f} (incl. {self.total_fees:.2f} fees)\n"
            f"   Total Realized Gains: {self.total_realized_gains:.2f}\n"
            f"   Total Dividends: {self.total_dividends:.2f}\n"
        )
