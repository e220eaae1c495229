"""Repositories holding the persisted application state."""

from .application_repository import ApplicationRepository
from .operation_repository import OperationRepository
from .quote_repository import QuoteRepository
from .security_repository import SecurityRepository
from .tax_repository import TaxRepository

__all__ = [
    "ApplicationRepository",
    "OperationRepository",
    "QuoteRepository",
    "SecurityRepository",
    "TaxRepository",
]
