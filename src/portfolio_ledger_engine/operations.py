# src/portfolio_ledger_engine/operations.py
import dataclasses
import logging
import math
from dataclasses import dataclass
from datetime import datetime
from functools import cached_property
from typing import TYPE_CHECKING, Any, ClassVar, Optional, Union

from pydantic import TypeAdapter

from . import config
from .checksum import calculate_generic_checksum
from .dateutils import compare_normalized_dates, format_normalized_date, normalize_date
from .enums import EvalType, OperationType
from .exceptions import InvalidArgumentError
from .math_utils import format_number
from .models.records import BuyRecord, DividendRecord, OperationRecord, SellRecord, StockSplitRecord
from .state_machine import HOLDING_STATE_MACHINE

if TYPE_CHECKING:
    from .holding import Holding

logger = logging.getLogger(__name__)

_OPERATION_RECORD_ADAPTER = TypeAdapter(OperationRecord)


def _validated_amount(value: Any, message: str, allow_zero: bool) -> float:
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise InvalidArgumentError(message)
    if not math.isfinite(amount) or amount < 0 or (amount == 0 and not allow_zero):
        raise InvalidArgumentError(message)
    return amount


@dataclass(frozen=True)
class _BaseOperation:
    """
    Common behaviour of all ledger operations.

    Operations are immutable values: the date is normalized to midnight UTC and every
    amount is validated on construction, so an invalid operation can never reach a
    holding.
    """
    date: datetime

    operation_type: ClassVar[OperationType]

    def __post_init__(self):
        object.__setattr__(self, "date", normalize_date(self.date))

    @cached_property
    def checksum(self) -> str:
        return calculate_generic_checksum(self.date, *self._checksum_amounts())

    def _checksum_amounts(self) -> tuple[float, ...]:
        raise NotImplementedError

    def apply(self, holding: "Holding") -> None:
        HOLDING_STATE_MACHINE.apply(self, holding)

    def clone(self):
        return dataclasses.replace(self)

    def to_record(self):
        raise NotImplementedError

    def to_dict(self) -> dict:
        return self.to_record().model_dump(by_alias=True)

    @property
    def _iso_date(self) -> str:
        return format_normalized_date(self.date)


@dataclass(frozen=True)
class _Transaction(_BaseOperation):
    shares: float
    price_per_share: float
    fees: float = 0.0

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, "shares", _validated_amount(
            self.shares, "Number of shares must be greater than zero.", allow_zero=False))
        object.__setattr__(self, "price_per_share", _validated_amount(
            self.price_per_share, "Price per share cannot be negative.", allow_zero=True))
        object.__setattr__(self, "fees", _validated_amount(
            self.fees, "Fees cannot be negative.", allow_zero=True))

    @property
    def nominal_amount(self) -> float:
        return self.shares * self.price_per_share

    def __str__(self) -> str:
        return f"{self.operation_type.value} {format_number(self.shares)} shares @ {format_number(self.price_per_share)}"


@dataclass(frozen=True)
class Buy(_Transaction):
    operation_type: ClassVar[OperationType] = OperationType.BUY

    def _checksum_amounts(self) -> tuple[float, ...]:
        return self.shares, self.price_per_share, self.fees

    def to_record(self) -> BuyRecord:
        return BuyRecord(
            date=self._iso_date,
            checksum=self.checksum,
            shares=self.shares,
            price_per_share=self.price_per_share,
            fees=self.fees,
        )


@dataclass(frozen=True)
class Sell(_Transaction):
    taxes: float = 0.0

    operation_type: ClassVar[OperationType] = OperationType.SELL

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, "taxes", _validated_amount(
            self.taxes, "Taxes cannot be negative.", allow_zero=True))

    def _checksum_amounts(self) -> tuple[float, ...]:
        return self.shares, self.price_per_share, self.fees, self.taxes

    def to_record(self) -> SellRecord:
        return SellRecord(
            date=self._iso_date,
            checksum=self.checksum,
            shares=self.shares,
            price_per_share=self.price_per_share,
            fees=self.fees,
            taxes=self.taxes,
        )


@dataclass(frozen=True)
class Dividend(_BaseOperation):
    dividend_per_share: float
    applicable_shares: float
    exchange_rate: float = 1.0
    taxes: float = 0.0

    operation_type: ClassVar[OperationType] = OperationType.DIVIDEND

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, "dividend_per_share", _validated_amount(
            self.dividend_per_share, "Dividend per share must be greater than zero.", allow_zero=False))
        object.__setattr__(self, "applicable_shares", _validated_amount(
            self.applicable_shares, "Applicable shares must be greater than zero.", allow_zero=False))
        object.__setattr__(self, "exchange_rate", _validated_amount(
            self.exchange_rate, "Exchange rate must be greater than zero.", allow_zero=False))
        object.__setattr__(self, "taxes", _validated_amount(
            self.taxes, "Taxes cannot be negative.", allow_zero=True))

    @property
    def gross_amount(self) -> float:
        """Dividend paid for all applicable shares, converted with the exchange rate."""
        return self.dividend_per_share * self.applicable_shares / self.exchange_rate

    def get_dividend(self, eval_type: Optional[EvalType] = None) -> float:
        if EvalType(eval_type or config.DEFAULT_EVAL_TYPE) is EvalType.NET:
            return self.gross_amount - self.taxes
        return self.gross_amount

    def _checksum_amounts(self) -> tuple[float, ...]:
        return self.applicable_shares, self.dividend_per_share

    def to_record(self) -> DividendRecord:
        return DividendRecord(
            date=self._iso_date,
            checksum=self.checksum,
            dividend_per_share=self.dividend_per_share,
            applicable_shares=self.applicable_shares,
            exchange_rate=self.exchange_rate,
            taxes=self.taxes,
        )

    def __str__(self) -> str:
        return f"{self.operation_type.value} ({format_number(self.dividend_per_share)})"


@dataclass(frozen=True)
class StockSplit(_BaseOperation):
    split_ratio: float

    operation_type: ClassVar[OperationType] = OperationType.SPLIT

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, "split_ratio", _validated_amount(
            self.split_ratio, "Ratio must be greater than zero.", allow_zero=False))

    def _checksum_amounts(self) -> tuple[float, ...]:
        return (self.split_ratio,)

    def to_record(self) -> StockSplitRecord:
        return StockSplitRecord(date=self._iso_date, checksum=self.checksum, split_ratio=self.split_ratio)

    def __str__(self) -> str:
        return f"{self.operation_type.value} ({format_number(self.split_ratio)})"


Operation = Union[Buy, Sell, Dividend, StockSplit]


def compare_operations_by_date(a: Operation, b: Operation) -> int:
    return compare_normalized_dates(a.date, b.date)


def operation_checksum(operation: Operation) -> str:
    return operation.checksum


_OPERATION_BUILDERS = {
    OperationType.BUY: lambda r: Buy(r.date, r.shares, r.price_per_share, r.fees),
    OperationType.SELL: lambda r: Sell(r.date, r.shares, r.price_per_share, r.fees, r.taxes),
    OperationType.DIVIDEND: lambda r: Dividend(r.date, r.dividend_per_share, r.applicable_shares, r.exchange_rate, r.taxes),
    OperationType.SPLIT: lambda r: StockSplit(r.date, r.split_ratio),
}


def deserialize_operation(data: Union[dict, BuyRecord, SellRecord, DividendRecord, StockSplitRecord]) -> Operation:
    """
    Builds an operation from its persisted form.

    Dictionaries are validated against the record schema first; the stored checksum is
    recomputed from the amounts and never taken over.
    """
    record = _OPERATION_RECORD_ADAPTER.validate_python(data) if isinstance(data, dict) else data
    operation = _OPERATION_BUILDERS[OperationType(record.operation_type)](record)
    if record.checksum is not None and record.checksum != operation.checksum:
        logger.debug(
            f"Stored checksum {record.checksum} of {operation} on {operation._iso_date} "
            f"differs from the recomputed {operation.checksum}."
        )
    return operation
