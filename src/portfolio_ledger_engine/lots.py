# src/portfolio_ledger_engine/lots.py
from datetime import datetime


class Lot:
    """
    A tranche of shares acquired by a single BUY, tracked until fully sold (FIFO).

    Lots are owned by exactly one Holding and mutated in place by SELL and SPLIT
    processing; they are never shared with the ledger operation that opened them.
    """
    def __init__(self, shares: float, price_per_share: float, fees: float, opened_on: datetime):
        self.shares = shares
        self.price_per_share = price_per_share
        self.fees = fees
        self.opened_on = opened_on

    @property
    def cost(self) -> float:
        """Nominal cost of the shares still open in this lot, excluding fees."""
        return self.shares * self.price_per_share

    def __repr__(self) -> str:
        return (f"Lot(opened_on='{self.opened_on:%Y-%m-%d}', "
                f"shares={self.shares:.4f}, "
                f"price_per_share={self.price_per_share:.4f}, "
                f"fees={self.fees:.2f})")
