"""farmqc - data quality validation for farm management records.

Validate. Score. Fix.

farmqc checks animal, crop, task, inventory, farm, user and weather
records before they are created, updated or imported: per-field schema
rules, cross-field business rules, quality and confidence scoring, and
deterministic auto-fixes.

Example:
    >>> from farmqc import DataValidationEngine, ValidationContext
    >>>
    >>> engine = DataValidationEngine()
    >>> context = ValidationContext(entity_kind="inventory", operation_kind="create")
    >>> result = await engine.validate_data(record, context)
    >>> result.raise_for_errors()
"""

from farmqc._version import __version__
from farmqc.core.config import FarmqcSettings, configure, get_settings
from farmqc.core.exceptions import (
    ConfigurationError,
    FarmqcError,
    RecordLoadError,
    RuleEvaluationError,
    ValidationError,
)
from farmqc.core.logging import get_logger, setup_logging
from farmqc.core.types import (
    BatchItem,
    DataInsights,
    EntityKind,
    Finding,
    OperationKind,
    ValidationContext,
    ValidationResult,
    ValidationStats,
)

__all__ = [
    # Version
    "__version__",
    # Core types
    "BatchItem",
    "DataInsights",
    "EntityKind",
    "Finding",
    "OperationKind",
    "ValidationContext",
    "ValidationResult",
    "ValidationStats",
    # Config
    "FarmqcSettings",
    "configure",
    "get_settings",
    # Exceptions
    "FarmqcError",
    "ValidationError",
    "ConfigurationError",
    "RuleEvaluationError",
    "RecordLoadError",
    # Logging
    "get_logger",
    "setup_logging",
    # Validation (lazy)
    "DataValidationEngine",
    "validate_import",
]


def __getattr__(name: str):
    """Lazy import for the validation layer."""
    if name == "DataValidationEngine":
        from farmqc.validate.engine import DataValidationEngine
        return DataValidationEngine

    if name == "validate_import":
        from farmqc.validate.importer import validate_import
        return validate_import

    raise AttributeError(f"module 'farmqc' has no attribute {name!r}")
