# src/portfolio_ledger_engine/models/quote.py
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..dateutils import format_normalized_date, normalize_date
from .records import QuoteItemRecord


class QuoteItem(BaseModel):
    """
    A single end-of-day price of a security.
    """
    date: datetime = Field(..., description="Quote day, normalized to midnight UTC")
    price: float = Field(..., ge=0, description="Price per share on that day")

    @field_validator("date", mode="before")
    @classmethod
    def standardize_date(cls, v: Any) -> datetime:
        return normalize_date(v)

    def to_record(self) -> QuoteItemRecord:
        return QuoteItemRecord(date=format_normalized_date(self.date), price=self.price)

    model_config = ConfigDict(frozen=True)
