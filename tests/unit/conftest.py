# tests/unit/conftest.py
import pytest

from portfolio_ledger_engine.models.security import Security

APPLE_ISIN = "US0378331005"
MICROSOFT_ISIN = "US5949181045"
SAP_ISIN = "DE0007164600"


@pytest.fixture
def apple() -> Security:
    return Security(
        isin=APPLE_ISIN, nsin="865985", name="Apple Inc.",
        country="United States", country_code="US", currency="USD",
    )


@pytest.fixture
def microsoft() -> Security:
    return Security(
        isin=MICROSOFT_ISIN, nsin="870747", name="Microsoft Corp.",
        country="United States", country_code="US", currency="USD",
    )


@pytest.fixture
def sap() -> Security:
    return Security(
        isin=SAP_ISIN, nsin="716460", name="SAP SE",
        country="Germany", country_code="DE",
    )
