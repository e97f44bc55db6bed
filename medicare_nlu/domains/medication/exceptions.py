# ============================================================================
# SCOPE: DOMAIN (Medication)
# Description: Exceptions raised while loading the medication NLU data assets.
# ============================================================================
"""
Medication NLU Exceptions.

Text analysis itself never raises: malformed or empty input degrades to empty
results. These exceptions only signal a broken deployment, i.e. a pattern or
template file that is missing or malformed. They surface once, when the
engine is built.
"""

from __future__ import annotations

from pathlib import Path


class MedicationNLUError(Exception):
    """Base exception for medication NLU errors."""

    pass


class PatternTableError(MedicationNLUError):
    """
    Raised when the pattern tables cannot be loaded or compiled.

    Attributes:
        path: File the tables were read from, if any
        section: Table section that failed (e.g. "dosage", "intents")
    """

    def __init__(
        self,
        message: str,
        path: Path | str | None = None,
        section: str | None = None,
    ) -> None:
        self.path = str(path) if path is not None else None
        self.section = section

        details = message
        if section:
            details = f"[{section}] {details}"
        if self.path:
            details = f"{details} (file: {self.path})"
        super().__init__(details)


class ResponseTemplateError(MedicationNLUError):
    """
    Raised when response templates are missing or incomplete.

    Attributes:
        path: Template file path
        missing_keys: Template keys required but not found
    """

    def __init__(
        self,
        message: str,
        path: Path | str | None = None,
        missing_keys: list[str] | None = None,
    ) -> None:
        self.path = str(path) if path is not None else None
        self.missing_keys = missing_keys or []

        details = message
        if self.missing_keys:
            details = f"{details}: {', '.join(self.missing_keys)}"
        if self.path:
            details = f"{details} (file: {self.path})"
        super().__init__(details)


__all__ = [
    "MedicationNLUError",
    "PatternTableError",
    "ResponseTemplateError",
]
