"""Auto-fix engine and fix suggestions.

Fixes are deterministic and keyed by finding code. Only findings flagged
``auto_fixable`` are acted on; see ``is_auto_fixable`` for which ones are.
"""

from datetime import datetime, timezone
from typing import Any, Iterable

from dateutil import parser as date_parser

from farmqc.core.logging import get_logger
from farmqc.core.types import Finding

logger = get_logger(__name__)

REQUIRED_FIELD_MISSING = "required_field_missing"
SCHEMA_VALIDATION_ERROR = "schema_validation_error"

DEFAULT_STATUS = "active"
TRUTHY_STRINGS = frozenset({"true", "1"})

# Parsing against two unrelated defaults exposes any date part the string
# did not supply ("5", "March 2026"); those values are left for the user.
_PARSE_DEFAULTS = (datetime(2000, 1, 1), datetime(2011, 12, 28))

FIX_SUGGESTIONS: dict[str, list[str]] = {
    REQUIRED_FIELD_MISSING: [
        "Provide a value for this field",
        "Check that the import column is mapped to this field",
    ],
    SCHEMA_VALIDATION_ERROR: [
        "Check the value's format and allowed range",
        "Dates should look like YYYY-MM-DD",
    ],
    "age_weight_mismatch": [
        "Double-check the weight and its unit (kg)",
        "Verify the animal's age",
    ],
    "harvest_too_early": [
        "Check the planting and harvest dates",
        "Confirm the crop type, growing periods differ by crop",
    ],
    "task_overdue": [
        "Reschedule the task with a new due date",
        "Mark the task completed if it is done",
    ],
    "due_date_too_soon": [
        "Move the due date later",
        "Raise the task priority",
    ],
    "low_stock": [
        "Reorder this item",
        "Adjust the minimum stock level if it is too high",
    ],
    "weather_inconsistency": [
        "Check the temperature reading and its unit",
        "Check the reported condition",
    ],
    "humidity_inconsistency": [
        "Check the humidity sensor reading",
    ],
    "unknown_field": [
        "Check the field name for typos",
        "Remove fields this entity does not store",
    ],
    "validation_internal_error": [
        "Retry the operation",
        "Report the record to an administrator if the problem persists",
    ],
}

GENERIC_SUGGESTIONS = ["Review the value and correct it manually"]


def get_fix_suggestions(finding: Finding | str) -> list[str]:
    """Look up fix hints for a finding or a finding code.

    Args:
        finding: A Finding or its code

    Returns:
        A new list of suggestions; a generic hint for unknown codes
    """
    code = finding.code if isinstance(finding, Finding) else finding
    return list(FIX_SUGGESTIONS.get(code, GENERIC_SUGGESTIONS))


def is_auto_fixable(field: str, code: str, value: Any = None) -> bool:
    """Decide whether ``auto_fix_data`` can correct a finding.

    Fixable:
    - schema errors on ``*date*`` fields holding a string (re-parsed)
    - schema errors on ``is_active`` holding a string (coerced to bool)
    - missing ``status`` or ``updated_at`` (defaulted)
    """
    if code == SCHEMA_VALIDATION_ERROR:
        if not isinstance(value, str):
            return False
        return "date" in field or field == "is_active"
    if code == REQUIRED_FIELD_MISSING:
        return field in ("status", "updated_at")
    return False


def _is_missing(value: Any) -> bool:
    return value is None or value == ""


def _fix_date(value: str, expected: Any) -> str | None:
    try:
        first, second = (
            date_parser.parse(value, default=default) for default in _PARSE_DEFAULTS
        )
    except (ValueError, OverflowError):
        logger.debug(f"Could not parse date value {value!r}")
        return None
    if first != second:
        logger.debug(f"Date value {value!r} is incomplete")
        return None
    if expected == "datetime":
        return first.isoformat()
    return first.date().isoformat()


def _fix_value(record: dict[str, Any], finding: Finding) -> Any:
    """Corrected value for one finding, or the current value when none applies."""
    current = record.get(finding.field)

    if finding.code == SCHEMA_VALIDATION_ERROR and isinstance(current, str):
        if finding.field == "is_active":
            return current.strip().lower() in TRUTHY_STRINGS
        if "date" in finding.field:
            fixed = _fix_date(current, finding.expected)
            return current if fixed is None else fixed

    if finding.code == REQUIRED_FIELD_MISSING and _is_missing(current):
        if finding.field == "status":
            return DEFAULT_STATUS
        if finding.field == "updated_at":
            return datetime.now(timezone.utc).isoformat()

    return current


def auto_fix_data(record: dict[str, Any], findings: Iterable[Finding]) -> dict[str, Any]:
    """Apply deterministic corrections for auto-fixable findings.

    Copy-on-write: the input record is never modified. It is returned
    as-is when no fix changed anything, otherwise a shallow copy with the
    corrected fields is returned. Applying the function to its own output
    with the same findings changes nothing further.

    Args:
        record: Record the findings were produced for
        findings: Findings from a validation result

    Returns:
        The original record or a corrected copy
    """
    fixed: dict[str, Any] | None = None

    for finding in findings:
        if not finding.auto_fixable:
            continue
        source = fixed if fixed is not None else record
        current = source.get(finding.field)
        value = _fix_value(source, finding)
        if finding.field in source and value == current and type(value) is type(current):
            continue
        if finding.field not in source and value is None:
            continue
        if fixed is None:
            fixed = dict(record)
        fixed[finding.field] = value
        logger.debug(f"Auto-fixed {finding.field} for {finding.code}")

    return record if fixed is None else fixed
