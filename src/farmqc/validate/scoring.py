"""Quality and confidence scoring for classified findings."""

from dataclasses import dataclass
from typing import Any

from farmqc.core.types import DataInsights, Finding
from farmqc.validate.autofix import REQUIRED_FIELD_MISSING, SCHEMA_VALIDATION_ERROR

# Fixed placeholder: no freshness signal is derived from record timestamps.
TIMELINESS = 0.9

ERROR_WEIGHT = 0.7
WARNING_WEIGHT = 0.2
INFO_WEIGHT = 0.1
FINDING_SCALE = 10


@dataclass
class QualityScores:
    """Scores for one record.

    Attributes:
        insights: Sub-scores as integers 0-100
        quality_score: Rounded mean of the four sub-scores, 0-100
        confidence: Severity-weighted 0-1 heuristic
    """
    insights: DataInsights
    quality_score: int
    confidence: float


def _percent(value: float) -> int:
    return round(value * 100)


def score_findings(
    record: dict[str, Any],
    errors: list[Finding],
    warnings: list[Finding],
    suggestions: list[Finding],
) -> QualityScores:
    """Derive quality sub-scores, overall score and confidence.

    ``total`` is the number of keys in the record, floored at one so an
    empty record scores instead of dividing by zero.

    Args:
        record: The evaluated record
        errors: Error-severity findings
        warnings: Warning-severity findings
        suggestions: Info-severity findings

    Returns:
        QualityScores
    """
    total = max(1, len(record))
    missing = sum(1 for f in errors if f.code == REQUIRED_FIELD_MISSING)
    schema_errors = sum(1 for f in errors if f.code == SCHEMA_VALIDATION_ERROR)
    business_errors = len(errors) - missing - schema_errors

    completeness = max(0.0, (total - missing) / total)
    accuracy = max(0.0, 1 - schema_errors / total)
    consistency = max(0.0, 1 - business_errors / total)
    timeliness = TIMELINESS

    overall = (completeness + accuracy + consistency + timeliness) / 4

    confidence = (
        max(0.0, 1 - len(errors) * ERROR_WEIGHT / FINDING_SCALE)
        + max(0.0, 1 - len(warnings) * WARNING_WEIGHT / FINDING_SCALE)
        + max(0.0, 1 - len(suggestions) * INFO_WEIGHT / FINDING_SCALE)
    ) / 3

    return QualityScores(
        insights=DataInsights(
            completeness=_percent(completeness),
            accuracy=_percent(accuracy),
            consistency=_percent(consistency),
            timeliness=_percent(timeliness),
        ),
        quality_score=_percent(overall),
        confidence=confidence,
    )
