# src/portfolio_ledger_engine/repositories/tax_repository.py
from typing import Optional

from ..exceptions import InvalidArgumentError
from ..models.records import TaxDataRecord


class TaxRepository:
    """Withholding-tax rates per issuer country code."""

    @classmethod
    def from_dict(cls, data: dict) -> "TaxRepository":
        validated = TaxDataRecord.model_validate(data)
        repo = cls()
        for country_code, rate in validated.withholding_tax.items():
            repo.add_withholding_tax_rate(country_code, rate)
        return repo

    def __init__(self):
        self._withholding_tax_rates: dict[str, float] = {}

    def add_withholding_tax_rate(self, country_code: str, rate: float) -> None:
        if not 0 <= rate <= 1:
            raise InvalidArgumentError(f"Withholding-tax rate for {country_code} must be between 0 and 1, got {rate}.")
        self._withholding_tax_rates[country_code] = rate

    def get_withholding_tax_rate(self, country_code: str) -> Optional[float]:
        return self._withholding_tax_rates.get(country_code)

    def to_dict(self) -> dict:
        return TaxDataRecord(withholding_tax=dict(self._withholding_tax_rates)).model_dump(by_alias=True)
