# src/portfolio_ledger_engine/logging_utils.py
import logging
import sys
import uuid
from contextvars import ContextVar
from pythonjsonlogger import jsonlogger

from . import config

# Holds the identifier of the replay/evaluation run currently being logged.
replay_id_var: ContextVar[str] = ContextVar("replay_id", default="<not-set>")


class ReplayIdFilter(logging.Filter):
    """
    A logging filter that injects the current replay ID from a ContextVar
    into the log record, together with the service identity.
    """
    def filter(self, record):
        record.replay_id = replay_id_var.get()
        record.service = config.SERVICE_NAME
        record.environment = config.ENVIRONMENT
        return True


def setup_logging(level: str | None = None):
    """
    Configures the root logger for structured JSON logging with the replay ID
    attached to every record. All loggers of the engine inherit this setup.
    """
    root_logger = logging.getLogger()

    # Clear any existing handlers to prevent duplicate logs
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    root_logger.setLevel(level or config.LOG_LEVEL)

    handler = logging.StreamHandler(sys.stdout)
    formatter = jsonlogger.JsonFormatter(
        "%(asctime)s %(name)s %(levelname)s %(message)s %(service)s %(environment)s %(replay_id)s",
        rename_fields={
            "asctime": "timestamp",
            "levelname": "level",
            "name": "logger"
        }
    )
    handler.setFormatter(formatter)
    handler.addFilter(ReplayIdFilter())

    root_logger.addHandler(handler)


def generate_replay_id(prefix: str) -> str:
    """
    Generates a new replay ID with a short prefix (e.g., 'EVAL').
    """
    return f"{prefix}:{uuid.uuid4()}"
