"""Core module for farmqc - types, configuration, and utilities."""

from farmqc.core.types import (
    BatchItem,
    DataInsights,
    EntityKind,
    Finding,
    HistoryEntry,
    OperationKind,
    ValidationContext,
    ValidationResult,
    ValidationStats,
)
from farmqc.core.config import FarmqcSettings
from farmqc.core.exceptions import (
    FarmqcError,
    ValidationError,
    ConfigurationError,
    RuleEvaluationError,
    RecordLoadError,
)

__all__ = [
    # Types
    "BatchItem",
    "DataInsights",
    "EntityKind",
    "Finding",
    "HistoryEntry",
    "OperationKind",
    "ValidationContext",
    "ValidationResult",
    "ValidationStats",
    # Config
    "FarmqcSettings",
    # Exceptions
    "FarmqcError",
    "ValidationError",
    "ConfigurationError",
    "RuleEvaluationError",
    "RecordLoadError",
]
