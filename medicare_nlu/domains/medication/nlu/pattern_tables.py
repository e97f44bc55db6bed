# ============================================================================
# SCOPE: DOMAIN (Medication)
# Description: Versioned lexical pattern tables and interaction table.
# ============================================================================
"""Medication Pattern Tables.

Loads the static pattern tables from ``medication/patterns.yaml`` into an
immutable ``PatternTables`` object. Each table is a versioned data asset:
catalog names, dosage units, frequency phrasing, time expressions,
instruction keywords, intent triggers and the drug interaction table.

Usage:
    tables = load_pattern_tables()            # bundled YAML
    tables = load_pattern_tables(custom_path) # alternate asset

    extractor = MedicationEntityExtractor(tables)
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml

from ..exceptions import PatternTableError
from .models import IntentKind

logger = logging.getLogger(__name__)

PATTERNS_FILE = "medication/patterns.yaml"
DEFAULT_PATTERNS_PATH = Path(__file__).parents[3] / "prompts" / "templates" / PATTERNS_FILE

# Intents that may carry trigger patterns, in declared priority order
TRIGGER_INTENTS: tuple[IntentKind, ...] = (
    IntentKind.ADD_MEDICATION,
    IntentKind.CHECK_STATUS,
    IntentKind.GET_INFO,
    IntentKind.MARK_TAKEN,
    IntentKind.SKIP_DOSE,
    IntentKind.SNOOZE,
)

_REQUIRED_SECTIONS = (
    "catalog",
    "dosage",
    "frequency",
    "time",
    "instructions",
    "snooze_duration",
    "intents",
    "interactions",
)


@dataclass(frozen=True)
class PatternTables:
    """Compiled, read-only pattern tables.

    Attributes:
        version: Asset version string from the YAML file.
        catalog: Known drug name/brand patterns.
        dosage: Value+unit patterns.
        frequency: Frequency phrasing patterns.
        time: Time-of-day patterns.
        instructions: Instruction keywords (lower-case substrings).
        snooze_duration: "<number> <minutes|hours>" pattern.
        intents: (intent, triggers) pairs in priority order.
        interactions: Lower-case medication -> interacting substances.
    """

    version: str
    catalog: tuple[re.Pattern[str], ...]
    dosage: tuple[re.Pattern[str], ...]
    frequency: tuple[re.Pattern[str], ...]
    time: tuple[re.Pattern[str], ...]
    instructions: tuple[str, ...]
    snooze_duration: re.Pattern[str]
    intents: tuple[tuple[IntentKind, tuple[re.Pattern[str], ...]], ...]
    interactions: Mapping[str, tuple[str, ...]]

    def interactions_for(self, medication_name: str) -> tuple[str, ...]:
        """Return substances known to interact with a medication (case-insensitive)."""
        return self.interactions.get(medication_name.strip().lower(), ())

    def summary(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "catalog": len(self.catalog),
            "dosage": len(self.dosage),
            "frequency": len(self.frequency),
            "time": len(self.time),
            "instructions": len(self.instructions),
            "intents": [kind.value for kind, _ in self.intents],
            "interactions": len(self.interactions),
        }


# =============================================================================
# Loading
# =============================================================================

def load_pattern_tables(path: Path | str | None = None) -> PatternTables:
    """Load and compile pattern tables from YAML.

    Args:
        path: YAML file to read. Uses the bundled asset if None.

    Returns:
        Compiled PatternTables.

    Raises:
        PatternTableError: If the file is missing, unreadable, or invalid.
    """
    yaml_path = Path(path) if path is not None else DEFAULT_PATTERNS_PATH

    try:
        with open(yaml_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        logger.error("Pattern tables not found at %s", yaml_path)
        raise PatternTableError("Pattern tables file not found", path=yaml_path) from e
    except yaml.YAMLError as e:
        logger.error("Error parsing pattern tables YAML: %s", e)
        raise PatternTableError(f"Invalid YAML: {e}", path=yaml_path) from e

    tables = build_pattern_tables(data, source=yaml_path)
    logger.info("Loaded pattern tables v%s from %s", tables.version, yaml_path)
    return tables


def build_pattern_tables(data: Any, source: Path | str | None = None) -> PatternTables:
    """Compile a raw pattern-table mapping (as read from YAML).

    Args:
        data: Mapping with the pattern table sections.
        source: Origin of the data, used in error messages.

    Returns:
        Compiled PatternTables.

    Raises:
        PatternTableError: On missing sections or invalid regexes.
    """
    if not isinstance(data, dict):
        raise PatternTableError("Pattern tables must be a mapping", path=source)

    missing = [section for section in _REQUIRED_SECTIONS if section not in data]
    if missing:
        raise PatternTableError(f"Missing sections: {', '.join(missing)}", path=source)

    return PatternTables(
        version=str(data.get("version", "unversioned")),
        catalog=_compile_list(data["catalog"], "catalog", source),
        dosage=_compile_list(data["dosage"], "dosage", source),
        frequency=_compile_list(data["frequency"], "frequency", source),
        time=_compile_list(data["time"], "time", source),
        instructions=_keyword_list(data["instructions"], source),
        snooze_duration=_compile(data["snooze_duration"], "snooze_duration", source),
        intents=_compile_intents(data["intents"], source),
        interactions=_interaction_table(data["interactions"], source),
    )


def _compile(pattern: Any, section: str, source: Path | str | None) -> re.Pattern[str]:
    if not isinstance(pattern, str) or not pattern:
        raise PatternTableError(f"Pattern must be a non-empty string: {pattern!r}", source, section)
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        raise PatternTableError(f"Invalid regex {pattern!r}: {e}", source, section) from e


def _compile_list(
    patterns: Any,
    section: str,
    source: Path | str | None,
) -> tuple[re.Pattern[str], ...]:
    if not isinstance(patterns, list) or not patterns:
        raise PatternTableError("Expected a non-empty list of patterns", source, section)
    return tuple(_compile(pattern, section, source) for pattern in patterns)


def _keyword_list(keywords: Any, source: Path | str | None) -> tuple[str, ...]:
    if not isinstance(keywords, list):
        raise PatternTableError("Expected a list of keywords", source, "instructions")
    return tuple(str(keyword).lower() for keyword in keywords if str(keyword).strip())


def _compile_intents(
    entries: Any,
    source: Path | str | None,
) -> tuple[tuple[IntentKind, tuple[re.Pattern[str], ...]], ...]:
    if not isinstance(entries, list):
        raise PatternTableError("Expected a list of intent entries", source, "intents")

    compiled: list[tuple[IntentKind, tuple[re.Pattern[str], ...]]] = []
    seen: set[IntentKind] = set()

    for entry in entries:
        if not isinstance(entry, dict) or "kind" not in entry:
            raise PatternTableError(f"Intent entry without kind: {entry!r}", source, "intents")
        try:
            kind = IntentKind(entry["kind"])
        except ValueError as e:
            raise PatternTableError(f"Unknown intent kind: {entry['kind']!r}", source, "intents") from e

        if kind not in TRIGGER_INTENTS:
            raise PatternTableError(f"Intent {kind.value} cannot have triggers", source, "intents")
        if kind in seen:
            raise PatternTableError(f"Duplicate intent entry: {kind.value}", source, "intents")
        seen.add(kind)

        patterns = _compile_list(entry.get("patterns"), f"intents.{kind.value}", source)
        compiled.append((kind, patterns))

    return tuple(compiled)


def _interaction_table(
    table: Any,
    source: Path | str | None,
) -> Mapping[str, tuple[str, ...]]:
    if not isinstance(table, dict):
        raise PatternTableError("Expected a mapping", source, "interactions")

    normalized: dict[str, tuple[str, ...]] = {}
    for medication, substances in table.items():
        if not isinstance(substances, list):
            raise PatternTableError(
                f"Substances for {medication!r} must be a list", source, "interactions"
            )
        normalized[str(medication).strip().lower()] = tuple(
            str(substance).strip().lower() for substance in substances if str(substance).strip()
        )

    return MappingProxyType(normalized)


# =============================================================================
# Default Instance
# =============================================================================

_default_tables: PatternTables | None = None


def get_default_pattern_tables() -> PatternTables:
    """Return the bundled pattern tables, loading them on first use."""
    global _default_tables
    if _default_tables is None:
        _default_tables = load_pattern_tables()
    return _default_tables
