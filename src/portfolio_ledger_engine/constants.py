# src/portfolio_ledger_engine/constants.py

# --- Numeric comparison policy ---
FLOATING_POINT_TOLERANCE = 1e-6

# --- Persisted operation discriminants ---
OPERATION_TYPE_BUY = "BUY"
OPERATION_TYPE_SELL = "SELL"
OPERATION_TYPE_SPLIT = "SPLIT"
OPERATION_TYPE_DIVIDEND = "DIVIDEND"

# --- XIRR solver (fixed, not configurable) ---
XIRR_LOWER_BOUND = -0.999999
XIRR_UPPER_BOUND = 10.0
XIRR_MAX_BRACKET_ATTEMPTS = 50
XIRR_MAX_ITERATIONS = 100
XIRR_TOLERANCE = FLOATING_POINT_TOLERANCE
SECONDS_PER_YEAR = 365 * 24 * 3600

# --- Record formats ---
DATE_FORMAT_ISO = "%Y-%m-%d"
CHECKSUM_LENGTH = 8
SUPPORTED_CURRENCIES = ("CAD", "DKK", "EUR", "USD")
DEFAULT_CURRENCY = "EUR"
