"""Core data types for farmqc.

This module defines the fundamental data structures used throughout farmqc:
- EntityKind / OperationKind: closed enumerations carried in the context
- Finding: single classified validation outcome
- ValidationContext: what accompanies a record into the engine
- ValidationResult: classified findings plus quality metrics
- HistoryEntry / ValidationStats: rolling statistics over past calls
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Literal

from farmqc.core.exceptions import ValidationError

Severity = Literal["error", "warning", "info"]


class EntityKind(str, Enum):
    """Farm entity kinds with registered field rules."""

    ANIMAL = "animal"
    CROP = "crop"
    TASK = "task"
    INVENTORY = "inventory"
    FARM = "farm"
    USER = "user"
    WEATHER = "weather"


class OperationKind(str, Enum):
    """Operation a record is validated for.

    Carried in the context for rule authors; no built-in rule branches on it.
    """

    CREATE = "create"
    UPDATE = "update"
    IMPORT = "import"
    BULK = "bulk"


@dataclass
class Finding:
    """Single validation outcome for one field or rule.

    Attributes:
        field: Record field (or rule name) the finding is about
        message: Human-readable description
        code: Machine-readable code (e.g. "required_field_missing")
        severity: Decides which result bucket the finding lands in
        suggestions: Fix hints for the user
        auto_fixable: Whether auto_fix_data knows a correction for it
        value: The observed value
        expected: Description of the expected value, if known
    """
    field: str
    message: str
    code: str
    severity: Severity
    suggestions: list[str] = field(default_factory=list)
    auto_fixable: bool = False
    value: Any = None
    expected: Any = None

    def __str__(self) -> str:
        return f"[{self.severity.upper()}] {self.code}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert finding to dictionary for serialization."""
        return {
            "field": self.field,
            "message": self.message,
            "code": self.code,
            "severity": self.severity,
            "suggestions": list(self.suggestions),
            "auto_fixable": self.auto_fixable,
            "value": self.value,
            "expected": self.expected,
        }


@dataclass
class ValidationContext:
    """Everything that accompanies a record into the engine.

    String values for ``entity_kind`` and ``operation_kind`` are converted
    to their enum members; unknown values raise ValueError.

    Attributes:
        entity_kind: Which field rules and custom rules apply
        operation_kind: create, update, import or bulk
        record: The record under validation (filled in by the engine)
        previous_record: Stored version of the record for updates
        user_id: Acting user
        farm_id: Tenant the record belongs to
        timestamp: Reference clock for time-relative rules
    """
    entity_kind: EntityKind
    operation_kind: OperationKind = OperationKind.CREATE
    record: dict[str, Any] | None = None
    previous_record: dict[str, Any] | None = None
    user_id: str | None = None
    farm_id: int | str | None = None
    timestamp: datetime = field(default_factory=datetime.now)

    def __post_init__(self) -> None:
        """Normalize kinds to their enum members."""
        self.entity_kind = EntityKind(self.entity_kind)
        self.operation_kind = OperationKind(self.operation_kind)

    def to_dict(self) -> dict[str, Any]:
        """Convert context to dictionary for serialization."""
        return {
            "entity_kind": self.entity_kind.value,
            "operation_kind": self.operation_kind.value,
            "record": self.record,
            "previous_record": self.previous_record,
            "user_id": self.user_id,
            "farm_id": self.farm_id,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class DataInsights:
    """Quality sub-scores, each an integer 0-100."""
    completeness: int = 100
    accuracy: int = 100
    consistency: int = 100
    timeliness: int = 90

    def to_dict(self) -> dict[str, int]:
        return {
            "completeness": self.completeness,
            "accuracy": self.accuracy,
            "consistency": self.consistency,
            "timeliness": self.timeliness,
        }


@dataclass
class ValidationResult:
    """Outcome of validating one record.

    Attributes:
        errors: Error-severity findings; any error makes the record invalid
        warnings: Warning-severity findings
        suggestions: Info-severity findings
        auto_fixes_applied: Whether evaluation normalized any field
        confidence: 0-1 heuristic from the count and mix of findings
        quality_score: 0-100 aggregate of the data insights
        processing_time_ms: Time spent on the call that produced this result
        data_insights: completeness, accuracy, consistency, timeliness
        record: The record as evaluated, with evaluation-time fixes applied
    """
    errors: list[Finding] = field(default_factory=list)
    warnings: list[Finding] = field(default_factory=list)
    suggestions: list[Finding] = field(default_factory=list)
    auto_fixes_applied: bool = False
    confidence: float = 1.0
    quality_score: int = 100
    processing_time_ms: float = 0.0
    data_insights: DataInsights = field(default_factory=DataInsights)
    record: dict[str, Any] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        """True iff there are no error-severity findings."""
        return not self.errors

    @property
    def findings(self) -> list[Finding]:
        """All findings, errors first."""
        return [*self.errors, *self.warnings, *self.suggestions]

    def add(self, finding: Finding) -> None:
        """Route a finding into the bucket its severity selects."""
        if finding.severity == "error":
            self.errors.append(finding)
        elif finding.severity == "warning":
            self.warnings.append(finding)
        else:
            self.suggestions.append(finding)

    def raise_for_errors(self, entity_kind: str | None = None) -> None:
        """Raise ValidationError carrying the error findings, if any."""
        if self.errors:
            raise ValidationError(
                f"Record failed validation with {len(self.errors)} error(s)",
                entity_kind=entity_kind,
                findings=list(self.errors),
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert result to dictionary for serialization."""
        return {
            "is_valid": self.is_valid,
            "errors": [f.to_dict() for f in self.errors],
            "warnings": [f.to_dict() for f in self.warnings],
            "suggestions": [f.to_dict() for f in self.suggestions],
            "auto_fixes_applied": self.auto_fixes_applied,
            "confidence": self.confidence,
            "quality_score": self.quality_score,
            "processing_time_ms": self.processing_time_ms,
            "data_insights": self.data_insights.to_dict(),
            "record": self.record,
        }


@dataclass
class HistoryEntry:
    """One validation call retained for statistics."""
    timestamp: datetime
    context: ValidationContext
    result: ValidationResult


@dataclass
class ValidationStats:
    """Statistics over the retained validation history.

    Attributes:
        total: Number of retained calls
        error_rate: Mean number of errors per call
        average_processing_time: Mean processing time in milliseconds
        average_quality_score: Mean quality score
        top_error_codes: Up to five (code, count) pairs, most frequent first
    """
    total: int = 0
    error_rate: float = 0.0
    average_processing_time: float = 0.0
    average_quality_score: float = 0.0
    top_error_codes: list[tuple[str, int]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "error_rate": self.error_rate,
            "average_processing_time": self.average_processing_time,
            "average_quality_score": self.average_quality_score,
            "top_error_codes": [
                {"code": code, "count": count} for code, count in self.top_error_codes
            ],
        }


@dataclass
class BatchItem:
    """Result for one record of a batch, keyed by its position."""
    index: int
    result: ValidationResult
