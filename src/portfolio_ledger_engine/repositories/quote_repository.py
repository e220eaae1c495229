# src/portfolio_ledger_engine/repositories/quote_repository.py
from typing import Iterable, Optional

from pydantic import TypeAdapter

from ..dateutils import compare_normalized_dates
from ..models.quote import QuoteItem
from ..models.records import QuoteItemRecord
from ..sorted_list import SortedList

_QUOTES_ADAPTER = TypeAdapter(dict[str, list[QuoteItemRecord]])


def _compare_quotes(a: QuoteItem, b: QuoteItem) -> int:
    return compare_normalized_dates(a.date, b.date)


class QuoteRepository:
    """
    Date-ordered price series per ISIN, at most one quote per day.

    Unlike the operation ledger, a second quote for an already stored day replaces the
    stored one instead of being ignored.
    """

    @classmethod
    def from_dict(cls, data: dict) -> "QuoteRepository":
        validated = _QUOTES_ADAPTER.validate_python(data)
        repo = cls()
        for isin, records in validated.items():
            repo.add_all(isin, [QuoteItem(date=record.date, price=record.price) for record in records])
        return repo

    def __init__(self):
        self._quotes: dict[str, SortedList[QuoteItem]] = {}

    def add(self, isin: str, quote: QuoteItem) -> None:
        series = self._quotes.setdefault(isin, SortedList(_compare_quotes))
        existing_index = series.index_of(quote)
        if existing_index >= 0:
            series.remove_at(existing_index)
        series.add(quote)

    def add_all(self, isin: str, quotes: Iterable[QuoteItem]) -> None:
        for quote in quotes:
            self.add(isin, quote)

    def get(self, isin: str) -> list[QuoteItem]:
        series = self._quotes.get(isin)
        return series.to_list() if series is not None else []

    def get_latest_quote(self, isin: str) -> Optional[QuoteItem]:
        series = self._quotes.get(isin)
        if not series:
            return None
        return series.get(len(series) - 1)

    def get_all_latest_quotes(self) -> dict[str, Optional[QuoteItem]]:
        return {isin: self.get_latest_quote(isin) for isin in self._quotes}

    def to_dict(self) -> dict[str, list[dict]]:
        return {
            isin: [quote.to_record().model_dump() for quote in series]
            for isin, series in self._quotes.items()
        }

    def __str__(self) -> str:
        quote_count = sum(len(series) for series in self._quotes.values())
        return f"> Quotes: {len(self._quotes)} ISINs stored, {quote_count} quotes stored"
