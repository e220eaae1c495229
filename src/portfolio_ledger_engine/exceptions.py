# src/portfolio_ledger_engine/exceptions.py
from typing import Optional


class LedgerEngineError(Exception):
    """Base exception for all errors raised by the portfolio ledger engine."""
    def __init__(self, message="An unspecified error occurred in the portfolio ledger engine."):
        self.message = message
        super().__init__(self.message)


class InvalidArgumentError(LedgerEngineError, ValueError):
    """Raised when a value fails construction-time validation (amounts, dates, identifiers)."""
    def __init__(self, message="Invalid argument provided to the portfolio ledger engine."):
        self.message = message
        super().__init__(self.message)


class InsufficientSharesError(LedgerEngineError):
    """
    Raised when a SELL requests more shares than the holding currently has open.

    This is fatal for the replay of the affected security; the holding is left in
    a partial state and must be discarded.
    """
    def __init__(
        self,
        isin: str,
        requested_shares: float,
        available_shares: float,
        message: Optional[str] = None,
    ):
        self.isin = isin
        self.requested_shares = requested_shares
        self.available_shares = available_shares
        self.message = message or (
            "Cannot sell more shares than are currently in this portfolio holding "
            f"(ISIN: {isin}, requested: {requested_shares}, available: {available_shares})"
        )
        super().__init__(self.message)


class MissingQuoteError(LedgerEngineError):
    """Raised when an open position has no quote to value its terminal cash flow."""
    def __init__(self, message="Current quote cannot be missing if shares are held."):
        self.message = message
        super().__init__(self.message)
