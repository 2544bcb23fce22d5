"""Tests for core types."""

from datetime import datetime

import pytest

from farmqc.core.exceptions import ValidationError
from farmqc.core.types import (
    DataInsights,
    EntityKind,
    Finding,
    OperationKind,
    ValidationContext,
    ValidationResult,
    ValidationStats,
)


def _finding(severity: str, code: str = "some_code") -> Finding:
    return Finding(field="quantity", message="Something is off", code=code, severity=severity)


class TestFinding:
    """Tests for the Finding class."""

    def test_finding_defaults(self):
        """Test basic finding creation."""
        finding = _finding("warning")
        assert finding.suggestions == []
        assert finding.auto_fixable is False
        assert finding.value is None

    def test_finding_str(self):
        """Test finding string representation."""
        assert str(_finding("error", "low_stock")) == "[ERROR] low_stock: Something is off"

    def test_finding_to_dict(self):
        """Test finding serialization."""
        finding = Finding(
            field="weight",
            message="Weight looks wrong",
            code="age_weight_mismatch",
            severity="warning",
            suggestions=["Re-weigh the animal"],
            value=2000,
            expected=1000,
        )
        data = finding.to_dict()
        assert data["field"] == "weight"
        assert data["severity"] == "warning"
        assert data["suggestions"] == ["Re-weigh the animal"]
        assert data["value"] == 2000
        assert data["expected"] == 1000


class TestValidationContext:
    """Tests for the ValidationContext class."""

    def test_strings_become_enums(self):
        """Test that kinds given as strings are normalized."""
        context = ValidationContext(entity_kind="crop", operation_kind="update")
        assert context.entity_kind is EntityKind.CROP
        assert context.operation_kind is OperationKind.UPDATE

    def test_default_operation(self):
        """Test the default operation kind."""
        assert ValidationContext(entity_kind="farm").operation_kind is OperationKind.CREATE

    def test_unknown_entity_kind(self):
        """Test that kinds outside the closed set are rejected."""
        with pytest.raises(ValueError):
            ValidationContext(entity_kind="tractor")

    def test_unknown_operation_kind(self):
        """Test that operations outside the closed set are rejected."""
        with pytest.raises(ValueError):
            ValidationContext(entity_kind="crop", operation_kind="delete")

    def test_to_dict(self):
        """Test context serialization."""
        context = ValidationContext(
            entity_kind=EntityKind.USER,
            user_id="u1",
            timestamp=datetime(2026, 1, 2, 3, 4, 5),
        )
        data = context.to_dict()
        assert data["entity_kind"] == "user"
        assert data["operation_kind"] == "create"
        assert data["timestamp"] == "2026-01-02T03:04:05"


class TestValidationResult:
    """Tests for the ValidationResult class."""

    def test_defaults(self):
        """Test an empty result."""
        result = ValidationResult()
        assert result.is_valid
        assert result.quality_score == 100
        assert result.confidence == 1.0
        assert result.data_insights == DataInsights()

    def test_add_routes_by_severity(self):
        """Test that findings land in the bucket matching their severity."""
        result = ValidationResult()
        result.add(_finding("error"))
        result.add(_finding("warning"))
        result.add(_finding("warning"))
        result.add(_finding("info"))

        assert len(result.errors) == 1
        assert len(result.warnings) == 2
        assert len(result.suggestions) == 1
        assert not result.is_valid
        assert [f.severity for f in result.findings] == ["error", "warning", "warning", "info"]

    def test_warnings_do_not_invalidate(self):
        """Test that only errors decide validity."""
        result = ValidationResult()
        result.add(_finding("warning"))
        result.add(_finding("info"))
        assert result.is_valid

    def test_raise_for_errors(self):
        """Test raising on error findings."""
        result = ValidationResult()
        result.add(_finding("error", "low_stock"))

        with pytest.raises(ValidationError) as exc_info:
            result.raise_for_errors(entity_kind="inventory")
        assert exc_info.value.entity_kind == "inventory"
        assert exc_info.value.details["codes"] == ["low_stock"]

    def test_raise_for_errors_when_valid(self):
        """Test that a valid result does not raise."""
        result = ValidationResult()
        result.add(_finding("warning"))
        result.raise_for_errors()

    def test_to_dict(self):
        """Test result serialization."""
        result = ValidationResult(quality_score=80, record={"quantity": 3})
        result.add(_finding("info", "unknown_field"))
        data = result.to_dict()

        assert data["is_valid"] is True
        assert data["quality_score"] == 80
        assert data["suggestions"][0]["code"] == "unknown_field"
        assert data["record"] == {"quantity": 3}
        assert data["data_insights"]["timeliness"] == 90


class TestValidationStats:
    """Tests for the ValidationStats class."""

    def test_to_dict(self):
        """Test stats serialization."""
        stats = ValidationStats(total=2, error_rate=1.5, top_error_codes=[("low_stock", 3)])
        data = stats.to_dict()
        assert data["total"] == 2
        assert data["top_error_codes"] == [{"code": "low_stock", "count": 3}]
