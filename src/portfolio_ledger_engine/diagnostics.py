# src/portfolio_ledger_engine/diagnostics.py
import logging

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class Diagnostic(BaseModel):
    """
    A soft, reportable condition met while evaluating the ledger: the affected
    figure was omitted rather than guessed.
    """
    subject: str = Field(..., description="What the diagnostic is about, usually an ISIN.")
    reason: str = Field(..., description="Why the subject was skipped or its figure is unreliable.")


class DiagnosticsReporter:
    """
    Collects diagnostics per subject. Every new diagnostic is also logged as a warning.
    """
    def __init__(self):
        self._diagnostics: dict[str, Diagnostic] = {}

    def add(self, subject: str, reason: str):
        logger.warning(f"{subject}: {reason}")
        if subject in self._diagnostics:
            existing_reason = self._diagnostics[subject].reason
            if reason not in existing_reason:
                self._diagnostics[subject].reason += f"; {reason}"
        else:
            self._diagnostics[subject] = Diagnostic(subject=subject, reason=reason)

    def get_diagnostics(self) -> list[Diagnostic]:
        return list(self._diagnostics.values())

    def has_diagnostics(self) -> bool:
        return bool(self._diagnostics)

    def has_diagnostics_for(self, subject: str) -> bool:
        return subject in self._diagnostics

    def clear(self):
        self._diagnostics = {}
