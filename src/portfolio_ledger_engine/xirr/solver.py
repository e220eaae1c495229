# src/portfolio_ledger_engine/xirr/solver.py
import logging
import math
from datetime import datetime
from typing import Iterable, Optional

from ..constants import (
    SECONDS_PER_YEAR,
    XIRR_LOWER_BOUND,
    XIRR_MAX_BRACKET_ATTEMPTS,
    XIRR_MAX_ITERATIONS,
    XIRR_TOLERANCE,
    XIRR_UPPER_BOUND,
)
from ..diagnostics import DiagnosticsReporter
from ..exceptions import InvalidArgumentError
from ..math_utils import is_effectively_zero
from ..monitoring import XIRR_ITERATIONS
from .cashflows import CashFlow

logger = logging.getLogger(__name__)


class XIRRCalculator:
    """
    Solves the extended internal rate of return (XIRR) of a cash-flow series by
    bisection.

    Years are measured as elapsed seconds over a fixed 365-day year. Failing to bracket
    a root yields NaN; running out of iterations yields the last midpoint. Both cases are
    reported as diagnostics instead of raising.
    """

    def _discounted(self, amount: float, rate: float, years: float) -> float:
        base = 1 + rate
        if base <= 0:
            # A non-positive base has no real fractional power.
            return math.nan
        try:
            factor = math.pow(base, years)
        except OverflowError:
            return 0.0
        if factor == 0:
            return math.copysign(math.inf, amount) if amount else math.nan
        return amount / factor

    def _npv(self, rate: float, cashflows: list[CashFlow], start_date: datetime) -> float:
        """Calculates the Net Present Value for a given rate."""
        total = 0.0
        for cashflow in cashflows:
            years = (cashflow.date - start_date).total_seconds() / SECONDS_PER_YEAR
            total += self._discounted(cashflow.amount, rate, years)
        return total

    def _find_bracket(self, npv) -> Optional[tuple[float, float]]:
        low, high = XIRR_LOWER_BOUND, XIRR_UPPER_BOUND
        if not (npv(low) * npv(high) > 0):
            return low, high

        candidate_low = low
        for _ in range(XIRR_MAX_BRACKET_ATTEMPTS):
            candidate_low *= 2
            if npv(candidate_low) * npv(high) <= 0:
                return candidate_low, high

        candidate_high = high
        for _ in range(XIRR_MAX_BRACKET_ATTEMPTS):
            candidate_high *= 2
            if npv(low) * npv(candidate_high) <= 0:
                return low, candidate_high

        return None

    def compute_xirr(
        self,
        cashflows: Iterable[CashFlow],
        reporter: Optional[DiagnosticsReporter] = None,
        subject: str = "XIRR",
    ) -> float:
        """
        Returns the annualized rate zeroing the NPV of the cash flows.

        Raises:
            InvalidArgumentError: if there are no cash flows.
        """
        flows = sorted(cashflows, key=lambda cashflow: cashflow.date)
        if not flows:
            raise InvalidArgumentError("Cash flows cannot be empty.")

        start_date = flows[0].date

        def npv(rate: float) -> float:
            return self._npv(rate, flows, start_date)

        bracket = self._find_bracket(npv)
        if bracket is None:
            self._report(reporter, subject, "Could not find a rate range that brackets the XIRR; result is NaN.")
            return math.nan

        low, high = bracket
        rate = 0.0
        for iteration in range(1, XIRR_MAX_ITERATIONS + 1):
            rate = (low + high) / 2
            value = npv(rate)
            if is_effectively_zero(value, XIRR_TOLERANCE):
                XIRR_ITERATIONS.observe(iteration)
                return rate
            if value > 0:
                low = rate
            else:
                high = rate

        XIRR_ITERATIONS.observe(XIRR_MAX_ITERATIONS)
        self._report(
            reporter, subject,
            f"XIRR did not converge within {XIRR_MAX_ITERATIONS} iterations; returning best estimate {rate}.",
        )
        return rate

    def _report(self, reporter: Optional[DiagnosticsReporter], subject: str, reason: str) -> None:
        if reporter is not None:
            reporter.add(subject, reason)
        else:
            logger.warning(f"{subject}: {reason}")


def calculate_xirr(cashflows: Iterable[CashFlow], reporter: Optional[DiagnosticsReporter] = None) -> float:
    return XIRRCalculator().compute_xirr(cashflows, reporter)
