# src/portfolio_ledger_engine/config.py
import os
from dotenv import load_dotenv

# Load environment variables from a .env file for local development.
load_dotenv()


# Service identity (used by the structured log formatter)
SERVICE_NAME = os.getenv("SERVICE_NAME", "portfolio-ledger-engine")
ENVIRONMENT = os.getenv("ENVIRONMENT", "local")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Evaluation defaults
DEFAULT_EVAL_TYPE = os.getenv("DEFAULT_EVAL_TYPE", "net").lower()

# Dividend taxation (effective tax on top of the foreign withholding tax)
CAPITAL_GAINS_TAX_RATE = float(os.getenv("CAPITAL_GAINS_TAX_RATE", "0.25"))
CREDITABLE_WITHHOLDING_TAX_RATE = float(os.getenv("CREDITABLE_WITHHOLDING_TAX_RATE", "0.15"))
SOLIDARITY_SURCHARGE_RATE = float(os.getenv("SOLIDARITY_SURCHARGE_RATE", "0.055"))
