# src/portfolio_ledger_engine/holding.py
import logging
from collections import deque
from typing import TYPE_CHECKING, Deque, Iterable

from .lots import Lot
from .math_utils import is_effectively_zero
from .models.security import Security
from .monitoring import REPLAY_DEPTH

if TYPE_CHECKING:
    from .operations import Operation

logger = logging.getLogger(__name__)


class Holding:
    """
    Accounting state of a single security in the portfolio.

    A holding is only ever built by replaying the security's ledger from an empty state
    (see `from_operations`). Fees and sales taxes are those attributable to the currently
    open position; they are settled into the realized gains when the position closes.
    """

    @classmethod
    def from_operations(cls, security: Security, operations: Iterable["Operation"]) -> "Holding":
        """
        Replays the operations, in the given order, onto a fresh holding.

        Raises:
            InsufficientSharesError: if a SELL exceeds the shares open at that point. The
                partially replayed holding is discarded.
        """
        holding = cls(security)
        replayed = 0
        for operation in operations:
            operation.apply(holding)
            replayed += 1
        REPLAY_DEPTH.observe(replayed)
        logger.debug(f"Replayed {replayed} operations for {security.isin}; {holding.shares} shares open.")
        return holding

    def __init__(self, security: Security):
        self.security = security
        self.open_lots: Deque[Lot] = deque()
        self.shares = 0.0
        self.total_fees = 0.0
        self.sales_taxes = 0.0
        self.dividend_taxes = 0.0
        self.total_dividends = 0.0
        self.total_realized_gains = 0.0

    @property
    def isin(self) -> str:
        return self.security.isin

    @property
    def nominal_purchase_price(self) -> float:
        """Money paid for the currently held shares, without fees and taxes."""
        return sum(lot.cost for lot in self.open_lots)

    @property
    def total_cost_basis(self) -> float:
        """Money effectively paid for the currently held shares, including fees."""
        return 0.0 if self.shares == 0 else self.nominal_purchase_price + self.total_fees

    @property
    def average_price_per_share(self) -> float:
        return 0.0 if self.shares == 0 else self.total_cost_basis / self.shares

    @property
    def total_taxes(self) -> float:
        return self.sales_taxes

    @property
    def is_active(self) -> bool:
        return not is_effectively_zero(self.shares)

    def __repr__(self) -> str:
        return (f"Holding(isin='{self.security.isin}', "
                f"shares={self.shares:.4f}, "
                f"open_lots={len(self.open_lots)}, "
                f"realized={self.total_realized_gains:.2f})")
