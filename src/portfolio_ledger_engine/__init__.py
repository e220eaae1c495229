"""Deterministic portfolio ledger: holdings replay, aggregation and XIRR evaluation."""

from .evaluation import PortfolioEvaluation, calculate_annualized_returns, evaluate_portfolio
from .holding import Holding
from .operations import Buy, Dividend, Sell, StockSplit, deserialize_operation
from .portfolio import Portfolio

__all__ = [
    "Buy",
    "Sell",
    "Dividend",
    "StockSplit",
    "deserialize_operation",
    "Holding",
    "Portfolio",
    "PortfolioEvaluation",
    "calculate_annualized_returns",
    "evaluate_portfolio",
]
