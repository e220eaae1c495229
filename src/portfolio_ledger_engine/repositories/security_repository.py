# src/portfolio_ledger_engine/repositories/security_repository.py
import logging
from typing import Literal, Optional, Union

from ..models.security import Security

logger = logging.getLogger(__name__)

SecurityKey = Literal["isin", "nsin"]


class SecurityRepository:
    """
    The security master. A security is only admitted if neither its ISIN nor its NSIN
    is already stored.
    """

    @classmethod
    def from_list(cls, data: list) -> "SecurityRepository":
        repo = cls()
        for item in data:
            repo.add(item)
        return repo

    def __init__(self):
        self._securities: list[Security] = []

    def add(self, security: Union[Security, dict]) -> bool:
        """
        Adds the security, validating plain dictionaries first.

        Returns False, without raising, if the ISIN or NSIN is already taken.
        """
        if not isinstance(security, Security):
            security = Security.model_validate(security)
        if self.has("isin", security.isin) or self.has("nsin", security.nsin):
            logger.debug(f"Security {security} is already stored; ignoring it.")
            return False
        self._securities.append(security)
        return True

    def get_all(self) -> list[Security]:
        return list(self._securities)

    def get_by(self, key: SecurityKey, value: str) -> Optional[Security]:
        return next((s for s in self._securities if getattr(s, key) == value), None)

    def has(self, key: SecurityKey, value: str) -> bool:
        return self.get_by(key, value) is not None

    def to_list(self) -> list[dict]:
        return [security.model_dump(by_alias=True) for security in self._securities]

    def __len__(self) -> int:
        return len(self._securities)
