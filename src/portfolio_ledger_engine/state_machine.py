# src/portfolio_ledger_engine/state_machine.py
import logging
from typing import TYPE_CHECKING, Protocol

from .constants import FLOATING_POINT_TOLERANCE
from .enums import OperationType
from .exceptions import InsufficientSharesError, LedgerEngineError
from .lots import Lot
from .math_utils import is_effectively_zero

if TYPE_CHECKING:
    from .holding import Holding
    from .operations import Buy, Dividend, Operation, Sell, StockSplit

logger = logging.getLogger(__name__)


class OperationStrategy(Protocol):
    def apply(self, operation: "Operation", holding: "Holding") -> None: ...


class BuyStrategy:
    def apply(self, operation: "Buy", holding: "Holding") -> None:
        holding.open_lots.append(
            Lot(
                shares=operation.shares,
                price_per_share=operation.price_per_share,
                fees=operation.fees,
                opened_on=operation.date,
            )
        )
        holding.shares += operation.shares
        holding.total_fees += operation.fees


class SellStrategy:
    """
    Consumes open lots oldest-first and books the realized gain per consumed tranche.

    Fees and taxes of the sale accumulate on the holding; once the position is closed
    every accrued fee and tax is settled into the realized gains and the accumulators
    restart from zero.
    """
    def apply(self, operation: "Sell", holding: "Holding") -> None:
        if operation.shares - holding.shares > FLOATING_POINT_TOLERANCE:
            raise InsufficientSharesError(
                isin=holding.security.isin,
                requested_shares=operation.shares,
                available_shares=holding.shares,
            )

        shares_to_sell = operation.shares
        lots = holding.open_lots
        while shares_to_sell > FLOATING_POINT_TOLERANCE and lots:
            current_lot = lots[0]
            if current_lot.shares >= shares_to_sell:
                holding.total_realized_gains += (operation.price_per_share - current_lot.price_per_share) * shares_to_sell
                current_lot.shares -= shares_to_sell
                shares_to_sell = 0.0
            else:
                holding.total_realized_gains += (operation.price_per_share - current_lot.price_per_share) * current_lot.shares
                shares_to_sell -= current_lot.shares
                current_lot.shares = 0.0

            if is_effectively_zero(current_lot.shares):
                lots.popleft()

        holding.total_fees += operation.fees
        holding.sales_taxes += operation.taxes
        holding.shares -= operation.shares

        if is_effectively_zero(holding.shares):
            holding.shares = 0.0
            holding.total_realized_gains -= holding.total_fees + holding.sales_taxes
            holding.total_fees = 0.0
            holding.sales_taxes = 0.0
            logger.debug(f"Position in {holding.security.isin} closed on {operation.date:%Y-%m-%d}.")


class DividendStrategy:
    def apply(self, operation: "Dividend", holding: "Holding") -> None:
        holding.total_dividends += operation.gross_amount
        holding.dividend_taxes += operation.taxes


class StockSplitStrategy:
    def apply(self, operation: "StockSplit", holding: "Holding") -> None:
        ratio = operation.split_ratio
        for lot in holding.open_lots:
            lot.shares *= ratio
            lot.price_per_share /= ratio
        holding.shares *= ratio


class HoldingStateMachine:
    """
    Applies ledger operations to a holding, one strategy per operation type.
    """
    def __init__(self):
        self._strategies: dict[OperationType, OperationStrategy] = {
            OperationType.BUY: BuyStrategy(),
            OperationType.SELL: SellStrategy(),
            OperationType.DIVIDEND: DividendStrategy(),
            OperationType.SPLIT: StockSplitStrategy(),
        }

    def apply(self, operation: "Operation", holding: "Holding") -> None:
        strategy = self._strategies.get(operation.operation_type)
        if strategy is None:
            raise LedgerEngineError(f"No strategy registered for operation type '{operation.operation_type}'.")
        strategy.apply(operation, holding)


HOLDING_STATE_MACHINE = HoldingStateMachine()
