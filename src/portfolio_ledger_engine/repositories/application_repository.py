# src/portfolio_ledger_engine/repositories/application_repository.py
import logging
from typing import Optional

from ..models.records import ApplicationSnapshotRecord
from ..operations import deserialize_operation
from .operation_repository import OperationRepository
from .quote_repository import QuoteRepository
from .security_repository import SecurityRepository
from .tax_repository import TaxRepository

logger = logging.getLogger(__name__)


class ApplicationRepository:
    """
    The whole application state: security master, quotes, operation ledger and the
    optional withholding-tax table. Read and written wholesale as one JSON document.
    """

    @classmethod
    def from_dict(cls, data: dict) -> "ApplicationRepository":
        snapshot = ApplicationSnapshotRecord.model_validate(data)

        securities = SecurityRepository.from_list(snapshot.securities)

        quotes = QuoteRepository.from_dict(
            {isin: [item.model_dump() for item in items] for isin, items in snapshot.quotes.items()}
        )

        operations = OperationRepository()
        for isin, records in snapshot.operations.items():
            for record in records:
                operations.add(isin, deserialize_operation(record))

        taxes = None
        if snapshot.taxdata is not None:
            taxes = TaxRepository.from_dict(snapshot.taxdata.model_dump(by_alias=True))

        repo = cls(securities, quotes, operations, taxes)
        logger.info(
            f"Loaded application snapshot with {len(securities)} securities "
            f"and {len(operations)} operations."
        )
        return repo

    def __init__(
        self,
        securities: SecurityRepository,
        quotes: QuoteRepository,
        operations: OperationRepository,
        taxes: Optional[TaxRepository] = None,
    ):
        self.securities = securities
        self.quotes = quotes
        self.operations = operations
        self.taxes = taxes

    def to_dict(self) -> dict:
        data = {
            "securities": self.securities.to_list(),
            "quotes": self.quotes.to_dict(),
            "operations": self.operations.to_dict(),
        }
        if self.taxes is not None:
            data["taxdata"] = self.taxes.to_dict()
        return data
