# src/portfolio_ledger_engine/models/security.py
import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import DEFAULT_CURRENCY, SUPPORTED_CURRENCIES

_ISIN_REGEX = re.compile(r"^[A-Z]{2}[A-Z0-9]{9}\d$")


def is_valid_isin(isin: str) -> bool:
    """
    Checks the ISIN shape and its trailing mod-10 (Luhn) check digit.

    Letters expand to two digits (A=10 ... Z=35) before the Luhn sum is taken over the
    resulting digit string.
    """
    if not isinstance(isin, str) or not _ISIN_REGEX.match(isin):
        return False

    digits = "".join(str(int(char, 36)) for char in isin[:-1])
    total = 0
    # The rightmost payload digit is doubled since the check digit is excluded.
    for position, char in enumerate(reversed(digits)):
        value = int(char)
        if position % 2 == 0:
            value *= 2
            if value > 9:
                value -= 9
        total += value
    check_digit = (10 - total % 10) % 10
    return check_digit == int(isin[-1])


class Security(BaseModel):
    """
    An entry of the security master. Immutable once admitted.
    """
    isin: str = Field(..., description="International Securities Identification Number")
    nsin: str = Field(..., min_length=6, max_length=6, description="National security identifier (e.g. the German WKN)")
    name: str = Field(..., min_length=1, description="Display name of the security")
    country: str = Field(..., min_length=1, description="Country of the issuer")
    country_code: str = Field(..., alias="countryCode", pattern=r"^[A-Z]{2}$", description="ISO 3166 alpha-2 country code")
    currency: str = Field(default=DEFAULT_CURRENCY, description="Trading currency of the security")

    @field_validator("isin")
    @classmethod
    def validate_isin(cls, v: str) -> str:
        if not is_valid_isin(v):
            raise ValueError(f"'{v}' is not a valid ISIN.")
        return v

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        if v not in SUPPORTED_CURRENCIES:
            raise ValueError(f"Unsupported currency '{v}'. Expected one of {', '.join(SUPPORTED_CURRENCIES)}.")
        return v

    def __str__(self) -> str:
        return f"{self.name} ({self.isin})"

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
    )
