"""Rule evaluation for a single record.

Field rules run first, in registry order, then (optionally) the unknown-field
check, then every applicable custom rule in registration order. A rule that
raises never aborts the evaluation: the exception becomes a
``validation_internal_error`` finding scoped to that rule.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable

import pydantic

from farmqc.core.exceptions import RuleEvaluationError
from farmqc.core.logging import get_logger
from farmqc.core.types import EntityKind, Finding, ValidationContext
from farmqc.validate.autofix import (
    REQUIRED_FIELD_MISSING,
    SCHEMA_VALIDATION_ERROR,
    get_fix_suggestions,
    is_auto_fixable,
)
from farmqc.validate.registry import FieldRule, known_fields, rules_for
from farmqc.validate.rules import CUSTOM_RULES, CustomRule

logger = get_logger(__name__)

INTERNAL_ERROR = "validation_internal_error"
UNKNOWN_FIELD = "unknown_field"


@dataclass
class Evaluation:
    """Raw outcome of evaluating one record.

    Attributes:
        record: Copy of the input with evaluation-time fixes applied
        findings: Findings in evaluation order
        auto_fixes_applied: Whether any field was rewritten
    """
    record: dict[str, Any]
    findings: list[Finding] = field(default_factory=list)
    auto_fixes_applied: bool = False


def _is_missing(value: Any) -> bool:
    return value is None or value == ""


def _finding(
    field: str,
    message: str,
    code: str,
    severity: str,
    value: Any = None,
    expected: Any = None,
) -> Finding:
    return Finding(
        field=field,
        message=message,
        code=code,
        severity=severity,
        suggestions=get_fix_suggestions(code),
        auto_fixable=is_auto_fixable(field, code, value),
        value=value,
        expected=expected,
    )


def _schema_messages(rule: FieldRule, exc: pydantic.ValidationError) -> list[str]:
    """One message per violated constraint of a field.

    A failed union reports one error per branch, each with the branch in
    its ``loc``; those collapse into a single message.
    """
    errors = exc.errors()
    if len(errors) > 1 and all(error["loc"] for error in errors):
        return [f"Input should be {rule.expected}"]
    return [error["msg"] for error in errors]


class RuleEvaluator:
    """Evaluates field rules and custom rules against one record.

    The caller's record is never modified; evaluation works on a shallow
    copy which is returned in the Evaluation.

    Example:
        >>> evaluator = RuleEvaluator()
        >>> outcome = evaluator.evaluate(record, ValidationContext(entity_kind="crop"))
        >>> [f.code for f in outcome.findings]
    """

    def __init__(
        self,
        custom_rules: Iterable[CustomRule] | None = None,
        report_unknown_fields: bool = True,
    ) -> None:
        """Initialize RuleEvaluator.

        Args:
            custom_rules: Custom rule table, defaults to the built-in rules
            report_unknown_fields: Emit info findings for unrecognised keys
        """
        self.custom_rules = tuple(CUSTOM_RULES if custom_rules is None else custom_rules)
        self.report_unknown_fields = report_unknown_fields

    def evaluate(self, record: dict[str, Any], context: ValidationContext) -> Evaluation:
        """Evaluate every rule that applies to ``context.entity_kind``.

        Args:
            record: Record to validate
            context: Validation context

        Returns:
            Evaluation with findings in deterministic order
        """
        outcome = Evaluation(record=dict(record))
        kind = context.entity_kind

        for rule in rules_for(kind):
            try:
                findings = self._check_field(rule, outcome)
            except Exception as e:
                findings = [self._internal_error(rule.name, rule.name, e, outcome.record)]
            outcome.findings.extend(findings)

        if self.report_unknown_fields:
            outcome.findings.extend(self._check_unknown_fields(outcome.record, kind))

        for custom in self.custom_rules:
            if not custom.applies_to(kind):
                continue
            try:
                finding = custom.check(outcome.record, context)
            except Exception as e:
                finding = self._internal_error(custom.name, custom.owner_field, e, outcome.record)
            if finding is not None:
                if not finding.suggestions:
                    finding.suggestions = get_fix_suggestions(finding)
                outcome.findings.append(finding)

        return outcome

    def _check_field(self, rule: FieldRule, outcome: Evaluation) -> list[Finding]:
        """Run one field rule, rewriting the field when its auto-fix applies."""
        value = outcome.record.get(rule.name)

        if _is_missing(value):
            if not rule.required:
                return []
            return [
                _finding(
                    rule.name,
                    f"{rule.name} is required",
                    REQUIRED_FIELD_MISSING,
                    "error",
                    value=value,
                    expected=rule.expected,
                )
            ]

        try:
            coerced = rule.coerce(value)
        except pydantic.ValidationError as exc:
            return [
                _finding(
                    rule.name,
                    f"{rule.name}: {message}",
                    SCHEMA_VALIDATION_ERROR,
                    "error",
                    value=value,
                    expected=rule.expected,
                )
                for message in _schema_messages(rule, exc)
            ]

        if rule.auto_fix is not None:
            fixed = rule.auto_fix(coerced)
            if fixed != value:
                outcome.record[rule.name] = fixed
                outcome.auto_fixes_applied = True
        return []

    def _check_unknown_fields(self, record: dict[str, Any], kind: EntityKind) -> list[Finding]:
        known = known_fields(kind)
        return [
            _finding(
                str(key),
                f"{key} is not a known {kind.value} field",
                UNKNOWN_FIELD,
                "info",
                value=record[key],
            )
            for key in record
            if key not in known
        ]

    def _internal_error(
        self,
        rule_name: str,
        field: str,
        error: Exception,
        record: dict[str, Any],
    ) -> Finding:
        if isinstance(error, RuleEvaluationError):
            detail = error.message
        else:
            detail = f"{type(error).__name__}: {error}"
        logger.error(f"Error evaluating rule {rule_name}: {detail}")
        return _finding(
            field,
            f"Rule {rule_name} could not be evaluated ({detail})",
            INTERNAL_ERROR,
            "error",
            value=record.get(field),
        )
