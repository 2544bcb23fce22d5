"""Import-time validation of parsed rows.

Rows are validated as a batch. With ``auto_correct`` a failing row gets one
pass of ``auto_fix_data`` and is re-validated; rows that still fail are
rejected.
"""

from dataclasses import dataclass, field
from typing import Any

from farmqc.core.logging import get_logger
from farmqc.core.types import ValidationContext, ValidationResult
from farmqc.validate.engine import DataValidationEngine

logger = get_logger(__name__)


@dataclass
class ImportRow:
    """Outcome for one imported row.

    Attributes:
        index: Position of the row in the input
        record: Row as it would be written (corrected if auto-fixed)
        result: Result of the last validation of the row
        corrected: Whether auto-fix changed the row
    """
    index: int
    record: dict[str, Any]
    result: ValidationResult
    corrected: bool = False

    @property
    def accepted(self) -> bool:
        return self.result.is_valid


@dataclass
class ImportReport:
    """Validation results for an import.

    Attributes:
        total_rows: Number of rows validated
        corrected: Number of rows changed by auto-fix
        issues_by_code: Count of final findings grouped by code
        rows: Per-row outcomes, in input order
    """
    total_rows: int
    corrected: int = 0
    issues_by_code: dict[str, int] = field(default_factory=dict)
    rows: list[ImportRow] = field(default_factory=list)

    @property
    def passed(self) -> int:
        return sum(1 for row in self.rows if row.accepted)

    @property
    def failed(self) -> int:
        return self.total_rows - self.passed

    def accepted(self) -> list[dict[str, Any]]:
        """Records that may be written."""
        return [row.record for row in self.rows if row.accepted]

    def rejected(self) -> list[ImportRow]:
        """Rows that failed validation."""
        return [row for row in self.rows if not row.accepted]

    def summary(self) -> str:
        """Generate human-readable summary."""
        lines = [
            f"Validated {self.total_rows} rows:",
            f"  - Accepted: {self.passed}",
            f"  - Rejected: {self.failed}",
            f"  - Auto-corrected: {self.corrected}",
        ]
        if self.issues_by_code:
            lines.append("  - Issues by code:")
            for code, count in sorted(self.issues_by_code.items()):
                lines.append(f"      {code}: {count}")
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """Convert report to dictionary for serialization."""
        return {
            "total_rows": self.total_rows,
            "passed": self.passed,
            "failed": self.failed,
            "corrected": self.corrected,
            "issues_by_code": self.issues_by_code,
            "rows": [
                {
                    "index": row.index,
                    "accepted": row.accepted,
                    "corrected": row.corrected,
                    "quality_score": row.result.quality_score,
                    "errors": [str(f) for f in row.result.errors],
                    "warnings": [str(f) for f in row.result.warnings],
                }
                for row in self.rows
            ],
        }


async def validate_import(
    engine: DataValidationEngine,
    records: list[dict[str, Any]],
    context: ValidationContext,
    auto_correct: bool = False,
) -> ImportReport:
    """Validate parsed import rows, optionally auto-correcting failures.

    Args:
        engine: Engine to validate with
        records: Parsed rows
        context: Shared context, usually with operation kind "import"
        auto_correct: Re-validate failing rows once after auto-fix

    Returns:
        ImportReport
    """
    report = ImportReport(total_rows=len(records))
    for item in await engine.validate_batch(records, context):
        result = item.result
        row = ImportRow(index=item.index, record=result.record, result=result)

        if auto_correct and not result.is_valid:
            fixed = engine.auto_fix_data(result.record, result.findings)
            if fixed is not result.record:
                retried = await engine.validate_data(fixed, context)
                row = ImportRow(
                    index=item.index,
                    record=retried.record,
                    result=retried,
                    corrected=True,
                )
                report.corrected += 1

        for finding in row.result.findings:
            report.issues_by_code[finding.code] = report.issues_by_code.get(finding.code, 0) + 1
        report.rows.append(row)

    logger.info(
        f"Import of {report.total_rows} {context.entity_kind.value} rows: "
        f"{report.passed} accepted, {report.failed} rejected, {report.corrected} corrected"
    )
    return report
