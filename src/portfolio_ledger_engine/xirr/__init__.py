"""Money-weighted return (XIRR) of cash-flow series."""

from .cashflows import (
    CashFlow,
    convert_operations,
    get_cashflows_for_holding,
    get_cashflows_for_portfolio,
)
from .solver import XIRRCalculator, calculate_xirr

__all__ = [
    "CashFlow",
    "convert_operations",
    "get_cashflows_for_holding",
    "get_cashflows_for_portfolio",
    "XIRRCalculator",
    "calculate_xirr",
]
