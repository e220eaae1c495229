# src/portfolio_ledger_engine/repositories/operation_repository.py
import logging
from typing import Iterator, Optional

from pydantic import TypeAdapter

from ..models.records import OperationRecord
from ..operations import Operation, compare_operations_by_date, deserialize_operation, operation_checksum
from ..sorted_list import SortedList

logger = logging.getLogger(__name__)

_LEDGER_ADAPTER = TypeAdapter(dict[str, list[OperationRecord]])


class OperationRepository:
    """
    The operation ledger: one date-ordered, checksum-deduplicated list per ISIN.
    """

    @classmethod
    def from_dict(cls, data: dict) -> "OperationRepository":
        validated = _LEDGER_ADAPTER.validate_python(data)
        repo = cls()
        for isin, records in validated.items():
            for record in records:
                repo.add(isin, deserialize_operation(record))
        return repo

    def __init__(self):
        self._ledgers: dict[str, SortedList[Operation]] = {}

    def add(self, isin: str, operation: Operation) -> bool:
        """Stores the operation; returns False if the same operation is already recorded."""
        if isin not in self._ledgers:
            self._ledgers[isin] = SortedList(compare_operations_by_date, operation_checksum)
        added = self._ledgers[isin].add(operation)
        if not added:
            logger.debug(f"Ignoring duplicate operation {operation} ({operation.checksum}) for {isin}.")
        return added

    def get(self, isin: str) -> Optional[SortedList[Operation]]:
        return self._ledgers.get(isin)

    def isins(self) -> list[str]:
        return list(self._ledgers)

    def items(self) -> Iterator[tuple[str, SortedList[Operation]]]:
        return iter(list(self._ledgers.items()))

    def to_dict(self) -> dict[str, list[dict]]:
        return {
            isin: [operation.to_dict() for operation in operations]
            for isin, operations in self._ledgers.items()
        }

    def __len__(self) -> int:
        return sum(len(operations) for operations in self._ledgers.values())

    def __repr__(self) -> str:
        return f"OperationRepository(isins={len(self._ledgers)}, operations={len(self)})"
