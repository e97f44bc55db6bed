# ============================================================================
# SCOPE: DOMAIN (Medication)
# Description: Data models produced and consumed by the medication NLU engine.
# ============================================================================
"""Medication NLU Models.

Engine results (entities, parsed medications, intents, conflict warnings)
are immutable dataclasses built fresh on every call. The inbound medication
record supplied by the caller's repository is a pydantic model so invalid
records are rejected at the boundary.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Enumerations
# =============================================================================

class EntityKind(str, Enum):
    """Kinds of lexical fragments recognized in user text."""

    MEDICATION_NAME = "medication_name"
    DOSAGE = "dosage"
    FREQUENCY = "frequency"
    TIME = "time"
    DATE = "date"
    NUMBER = "number"
    INSTRUCTION = "instruction"


class IntentKind(str, Enum):
    """Classified purpose of a user utterance."""

    ADD_MEDICATION = "add_medication"
    CHECK_STATUS = "check_status"
    GET_INFO = "get_info"
    MARK_TAKEN = "mark_taken"
    SKIP_DOSE = "skip_dose"
    SNOOZE = "snooze"
    GENERAL_QUESTION = "general_question"
    UNKNOWN = "unknown"


class MatchSource(str, Enum):
    """Where a parsed medication name came from.

    CATALOG names matched the known drug catalog; HEURISTIC names are
    capitalized words that merely look like drug names.
    """

    CATALOG = "catalog"
    HEURISTIC = "heuristic"


class ConflictCategory(str, Enum):
    """Category of a medication safety concern."""

    INTERACTION = "interaction"
    TIMING = "timing"
    DOSAGE = "dosage"
    ALLERGY = "allergy"


class Severity(str, Enum):
    """Conflict severity, ordered low < medium < high < critical."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank


_SEVERITY_RANK: dict[Severity, int] = {
    Severity.LOW: 0,
    Severity.MEDIUM: 1,
    Severity.HIGH: 2,
    Severity.CRITICAL: 3,
}


# =============================================================================
# Inbound Records
# =============================================================================

class Medication(BaseModel):
    """A medication from the user's active list.

    Attributes:
        id: Repository identifier, if known.
        name: Medication name as the user registered it.
        dosage: Prescribed dose (e.g. "500mg").
        times: Scheduled times of day (e.g. ["08:00", "20:00"]).
        interval: Hours between doses for interval-based schedules.
        instructions: Free-text intake instructions.
        is_active: Whether the medication is currently taken.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str | None = None
    name: str = Field(..., min_length=1, description="Medication name")
    dosage: str = Field(default="", description="Prescribed dose")
    times: list[str] = Field(default_factory=list, description="Scheduled times of day")
    interval: int | None = Field(default=None, gt=0, description="Hours between doses")
    instructions: str | None = None
    is_active: bool = True


# =============================================================================
# Engine Results
# =============================================================================

@dataclass(frozen=True)
class Entity:
    """A typed, positioned span of recognized text.

    Attributes:
        kind: Entity kind.
        value: Exact matched substring.
        confidence: Score in (0, 1].
        start: Start offset in the source text.
        end: End offset (exclusive), always greater than start.
    """

    kind: EntityKind
    value: str
    confidence: float
    start: int
    end: int

    @property
    def span(self) -> tuple[int, int]:
        return (self.start, self.end)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "value": self.value,
            "confidence": self.confidence,
            "start": self.start,
            "end": self.end,
        }


@dataclass(frozen=True)
class ParsedMedication:
    """Candidate medication description extracted from free text."""

    name: str
    source: MatchSource
    confidence: float
    dosage: str | None = None
    frequency: str | None = None
    times: tuple[str, ...] = ()
    instructions: str | None = None

    @property
    def is_heuristic(self) -> bool:
        return self.source is MatchSource.HEURISTIC

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "source": self.source.value,
            "confidence": self.confidence,
            "dosage": self.dosage,
            "frequency": self.frequency,
            "times": list(self.times),
            "instructions": self.instructions,
        }


@dataclass(frozen=True)
class Intent:
    """Classified intent of one utterance.

    Attributes:
        kind: Intent kind.
        confidence: Score in (0, 1].
        entities: Every entity extracted from the same text.
        parameters: Intent-specific values; keys depend on kind.
    """

    kind: IntentKind
    confidence: float
    entities: tuple[Entity, ...] = ()
    parameters: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Read-only view over a private copy
        object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters)))

    def __hash__(self) -> int:
        return hash((self.kind, self.confidence, self.entities, tuple(sorted(self.parameters.items()))))

    @property
    def medication_name(self) -> str | None:
        return self.parameters.get("medication_name")

    def entities_of(self, kind: EntityKind) -> list[Entity]:
        return [entity for entity in self.entities if entity.kind is kind]

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "confidence": self.confidence,
            "entities": [entity.to_dict() for entity in self.entities],
            "parameters": {
                key: list(value) if isinstance(value, tuple) else value
                for key, value in self.parameters.items()
            },
        }


@dataclass(frozen=True)
class ConflictWarning:
    """Heuristic safety flag for a candidate medication."""

    category: ConflictCategory
    severity: Severity
    message: str
    recommendation: str
    medications: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category.value,
            "severity": self.severity.value,
            "message": self.message,
            "recommendation": self.recommendation,
            "medications": list(self.medications),
        }
