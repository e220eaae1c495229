# src/portfolio_ledger_engine/models/records.py
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import CHECKSUM_LENGTH
from ..dateutils import is_valid_iso_date_string
from .security import Security

_CHECKSUM_PATTERN = rf"^[0-9a-f]{{{CHECKSUM_LENGTH}}}$"


class _DatedRecord(BaseModel):
    date: str = Field(..., description="Calendar day of the record (YYYY-MM-DD)")

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: str) -> str:
        if not is_valid_iso_date_string(v):
            raise ValueError(f"'{v}' is not a valid YYYY-MM-DD date.")
        return v

    model_config = ConfigDict(populate_by_name=True)


class _OperationRecord(_DatedRecord):
    checksum: Optional[str] = Field(None, pattern=_CHECKSUM_PATTERN, description="Deduplication key of the operation")


class BuyRecord(_OperationRecord):
    operation_type: Literal["BUY"] = Field("BUY", alias="operationType")
    shares: float = Field(..., gt=0, description="Number of shares bought")
    price_per_share: float = Field(..., alias="pricePerShare", ge=0, description="Price paid per share")
    fees: float = Field(0.0, ge=0, description="Brokerage and exchange fees")


class SellRecord(_OperationRecord):
    operation_type: Literal["SELL"] = Field("SELL", alias="operationType")
    shares: float = Field(..., gt=0, description="Number of shares sold")
    price_per_share: float = Field(..., alias="pricePerShare", ge=0, description="Price received per share")
    fees: float = Field(0.0, ge=0, description="Brokerage and exchange fees")
    taxes: float = Field(0.0, ge=0, description="Taxes withheld on the sale")


class DividendRecord(_OperationRecord):
    operation_type: Literal["DIVIDEND"] = Field("DIVIDEND", alias="operationType")
    dividend_per_share: float = Field(..., alias="dividendPerShare", gt=0)
    applicable_shares: float = Field(..., alias="applicableShares", gt=0)
    exchange_rate: float = Field(1.0, alias="exchangeRate", gt=0, description="Units of dividend currency per unit of portfolio currency")
    taxes: float = Field(0.0, ge=0, description="Withholding tax on the dividend")


class StockSplitRecord(_OperationRecord):
    operation_type: Literal["SPLIT"] = Field("SPLIT", alias="operationType")
    split_ratio: float = Field(..., alias="splitRatio", gt=0)


OperationRecord = Annotated[
    Union[BuyRecord, SellRecord, DividendRecord, StockSplitRecord],
    Field(discriminator="operation_type"),
]


class QuoteItemRecord(_DatedRecord):
    price: float = Field(..., ge=0, description="Closing price of the day")


class TaxDataRecord(BaseModel):
    withholding_tax: dict[str, Annotated[float, Field(ge=0, le=1)]] = Field(
        default_factory=dict,
        alias="withholding-tax",
        description="Withholding-tax rate per country code",
    )

    model_config = ConfigDict(populate_by_name=True)


class ApplicationSnapshotRecord(BaseModel):
    """
    The unit of persistence: the whole application state as one JSON document.
    """
    securities: list[Security] = Field(default_factory=list)
    quotes: dict[str, list[QuoteItemRecord]] = Field(default_factory=dict)
    operations: dict[str, list[OperationRecord]] = Field(default_factory=dict)
    taxdata: Optional[TaxDataRecord] = None

    model_config = ConfigDict(populate_by_name=True)
