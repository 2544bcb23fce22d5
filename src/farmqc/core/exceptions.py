"""Custom exceptions for farmqc.

This module defines the exception hierarchy used throughout farmqc
for clear error handling and reporting.
"""

from typing import Any


class FarmqcError(Exception):
    """Base exception for all farmqc errors.

    All farmqc-specific exceptions inherit from this class,
    allowing users to catch all farmqc errors with a single except clause.
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        """Initialize FarmqcError.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class ValidationError(FarmqcError):
    """Raised when a record must not be written because it failed validation.

    The engine itself never raises this; callers opt in through
    ``ValidationResult.raise_for_errors()`` before writing to storage.
    """

    def __init__(
        self,
        message: str,
        entity_kind: str | None = None,
        findings: list | None = None,
    ) -> None:
        """Initialize ValidationError.

        Args:
            message: Human-readable error message
            entity_kind: Entity kind of the rejected record
            findings: Error-severity findings, surfaced verbatim
        """
        details: dict[str, Any] = {}
        if entity_kind:
            details["entity_kind"] = entity_kind
        if findings:
            details["codes"] = [f.code for f in findings]
        super().__init__(message, details)
        self.entity_kind = entity_kind
        self.findings = findings or []


class ConfigurationError(FarmqcError):
    """Raised when configuration is invalid.

    This is raised when settings are misconfigured or the schema
    registry does not cover every entity kind.
    """

    def __init__(
        self,
        message: str,
        setting_name: str | None = None,
        setting_value: str | None = None,
    ) -> None:
        """Initialize ConfigurationError.

        Args:
            message: Human-readable error message
            setting_name: Name of the problematic setting
            setting_value: Value that caused the error
        """
        details = {}
        if setting_name:
            details["setting_name"] = setting_name
        if setting_value:
            details["setting_value"] = setting_value
        super().__init__(message, details)
        self.setting_name = setting_name
        self.setting_value = setting_value


class RuleEvaluationError(FarmqcError):
    """Raised when a single rule cannot be evaluated.

    The rule evaluator converts this (and any other exception raised by
    a rule) into a ``validation_internal_error`` finding.
    """

    def __init__(
        self,
        message: str,
        rule_name: str | None = None,
        field: str | None = None,
    ) -> None:
        """Initialize RuleEvaluationError.

        Args:
            message: Human-readable error message
            rule_name: Name of the rule that failed
            field: Record field the rule was evaluating
        """
        details = {}
        if rule_name:
            details["rule_name"] = rule_name
        if field:
            details["field"] = field
        super().__init__(message, details)
        self.rule_name = rule_name
        self.field = field


class RecordLoadError(FarmqcError):
    """Raised when records cannot be loaded from an input file."""

    def __init__(self, message: str, path: str | None = None) -> None:
        details = {"path": path} if path else {}
        super().__init__(message, details)
        self.path = path
