# src/portfolio_ledger_engine/taxes.py
from datetime import datetime
from typing import Optional

from . import config
from .math_utils import round_currency
from .models.security import Security
from .operations import Dividend
from .repositories import TaxRepository


def calculate_effective_dividend_tax(
    withholding_tax_rate: Optional[float],
    dividend_per_share: float,
    shares: float,
    exchange_rate: float = 1.0,
) -> float:
    """
    Total tax drag on a foreign dividend: the withholding tax plus the domestic capital
    gains tax (with solidarity surcharge) on the part the withholding tax cannot offset.

    Returns 0 when no withholding-tax rate is known for the issuer country.
    """
    if not withholding_tax_rate:
        return 0.0

    gross_dividend = dividend_per_share * shares / (exchange_rate or 1.0)
    effective_tax_rate = withholding_tax_rate + (
        config.CAPITAL_GAINS_TAX_RATE - config.CREDITABLE_WITHHOLDING_TAX_RATE
    ) * (1 + config.SOLIDARITY_SURCHARGE_RATE)
    return round_currency(gross_dividend * effective_tax_rate)


def create_taxed_dividend(
    security: Security,
    tax_repository: Optional[TaxRepository],
    date: datetime,
    dividend_per_share: float,
    shares: float,
    exchange_rate: float = 1.0,
) -> Dividend:
    """Builds a dividend whose taxes follow the withholding-tax rate of the issuer country."""
    rate = tax_repository.get_withholding_tax_rate(security.country_code) if tax_repository else None
    taxes = calculate_effective_dividend_tax(rate, dividend_per_share, shares, exchange_rate)
    return Dividend(date, dividend_per_share, shares, exchange_rate, taxes)
