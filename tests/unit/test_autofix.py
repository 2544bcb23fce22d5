"""Tests for the auto-fix engine and fix suggestions."""

from datetime import datetime

import pytest

from farmqc.core.types import Finding
from farmqc.validate.autofix import (
    GENERIC_SUGGESTIONS,
    auto_fix_data,
    get_fix_suggestions,
    is_auto_fixable,
)


def _finding(field: str, code: str, value=None, expected=None, auto_fixable=True) -> Finding:
    return Finding(
        field=field,
        message=f"{field} problem",
        code=code,
        severity="error",
        auto_fixable=auto_fixable,
        value=value,
        expected=expected,
    )


class TestIsAutoFixable:
    """Tests for the auto-fixable decision table."""

    @pytest.mark.parametrize(
        "field,code,value,expected",
        [
            ("planting_date", "schema_validation_error", "March 1", True),
            ("planting_date", "schema_validation_error", 20260301, False),
            ("is_active", "schema_validation_error", "maybe", True),
            ("weight", "schema_validation_error", "heavy", False),
            ("status", "required_field_missing", None, True),
            ("updated_at", "required_field_missing", None, True),
            ("species", "required_field_missing", None, False),
            ("quantity", "low_stock", 0, False),
        ],
    )
    def test_decisions(self, field, code, value, expected):
        """Test which findings are auto-fixable."""
        assert is_auto_fixable(field, code, value) is expected


class TestAutoFixData:
    """Tests for auto_fix_data()."""

    def test_parses_date(self):
        """Test re-parsing a free-form date."""
        record = {"planting_date": "March 1, 2026"}
        finding = _finding("planting_date", "schema_validation_error", expected="date")
        fixed = auto_fix_data(record, [finding])
        assert fixed["planting_date"] == "2026-03-01"
        assert record["planting_date"] == "March 1, 2026"

    def test_parses_datetime(self):
        """Test re-parsing a free-form timestamp."""
        record = {"due_date": "Oct 25 2026 9:30"}
        finding = _finding("due_date", "schema_validation_error", expected="datetime")
        fixed = auto_fix_data(record, [finding])
        assert fixed["due_date"] == "2026-10-25T09:30:00"

    def test_unparseable_date_unchanged(self):
        """Test that a hopeless date leaves the record alone."""
        record = {"harvest_date": "sometime soon"}
        finding = _finding("harvest_date", "schema_validation_error", expected="date")
        assert auto_fix_data(record, [finding]) is record

    @pytest.mark.parametrize("raw", ["5", "March 2026", "Tuesday"])
    def test_incomplete_date_unchanged(self, raw):
        """Test that dates missing a day, month or year are not guessed."""
        record = {"planting_date": raw}
        finding = _finding("planting_date", "schema_validation_error", expected="date")
        assert auto_fix_data(record, [finding]) is record

    @pytest.mark.parametrize(
        "raw,expected",
        [("true", True), ("1", True), ("TRUE", True), ("maybe", False), ("no way", False)],
    )
    def test_is_active_coerced(self, raw, expected):
        """Test is_active string coercion."""
        fixed = auto_fix_data(
            {"is_active": raw}, [_finding("is_active", "schema_validation_error")]
        )
        assert fixed["is_active"] is expected

    def test_status_default(self):
        """Test the default status."""
        fixed = auto_fix_data({}, [_finding("status", "required_field_missing")])
        assert fixed == {"status": "active"}

    def test_updated_at_default(self):
        """Test that updated_at is stamped with the current time."""
        fixed = auto_fix_data({"status": ""}, [_finding("updated_at", "required_field_missing")])
        stamped = datetime.fromisoformat(fixed["updated_at"])
        assert stamped.tzinfo is not None

    def test_existing_values_kept(self):
        """Test that defaults never overwrite present values."""
        record = {"status": "sold"}
        assert auto_fix_data(record, [_finding("status", "required_field_missing")]) is record

    def test_ignores_non_fixable(self):
        """Test that findings without the flag are skipped."""
        record = {"planting_date": "March 1, 2026"}
        finding = _finding("planting_date", "schema_validation_error", auto_fixable=False)
        assert auto_fix_data(record, [finding]) is record

    def test_no_findings_returns_original(self):
        """Test the no-op case."""
        record = {"status": "active"}
        assert auto_fix_data(record, []) is record

    def test_idempotent(self):
        """Test that fixing a fixed record changes nothing."""
        record = {"planting_date": "1 March 2026", "is_active": "1"}
        findings = [
            _finding("planting_date", "schema_validation_error", expected="date"),
            _finding("is_active", "schema_validation_error"),
            _finding("status", "required_field_missing"),
            _finding("updated_at", "required_field_missing"),
        ]
        once = auto_fix_data(record, findings)
        twice = auto_fix_data(once, findings)
        assert twice is once
        assert once["planting_date"] == "2026-03-01"
        assert once["is_active"] is True
        assert once["status"] == "active"


class TestFixSuggestions:
    """Tests for get_fix_suggestions()."""

    def test_by_code(self):
        """Test lookup by code."""
        assert "Reorder this item" in get_fix_suggestions("low_stock")

    def test_by_finding(self):
        """Test lookup by finding."""
        suggestions = get_fix_suggestions(_finding("due_date", "task_overdue"))
        assert suggestions and suggestions[0].startswith("Reschedule")

    def test_fallback(self):
        """Test the generic fallback for unknown codes."""
        assert get_fix_suggestions("made_up_code") == GENERIC_SUGGESTIONS

    def test_returns_copy(self):
        """Test that callers cannot corrupt the table."""
        get_fix_suggestions("low_stock").clear()
        assert get_fix_suggestions("low_stock")
