"""Data validation engine.

Pipeline per call: cache lookup -> rule evaluation -> quality scoring ->
cache/history bookkeeping. The engine performs no I/O; the async entry
points exist to fit asynchronous call sites such as import pipelines.

Example:
    >>> engine = DataValidationEngine()
    >>> context = ValidationContext(entity_kind="animal", operation_kind="create")
    >>> result = await engine.validate_data(record, context)
    >>> if not result.is_valid:
    ...     for finding in result.errors:
    ...         print(finding)
"""

import time
from dataclasses import replace
from typing import Any, Iterable

from farmqc.core.config import FarmqcSettings, get_settings
from farmqc.core.logging import LogContext, get_logger
from farmqc.core.types import (
    BatchItem,
    Finding,
    ValidationContext,
    ValidationResult,
    ValidationStats,
)
from farmqc.validate.autofix import auto_fix_data, get_fix_suggestions
from farmqc.validate.evaluator import RuleEvaluator
from farmqc.validate.history import ValidationTracker, canonical_key
from farmqc.validate.rules import CustomRule
from farmqc.validate.scoring import score_findings

logger = get_logger(__name__)


class DataValidationEngine:
    """Validates farm records and tracks results.

    Each instance owns its cache and history, so independent instances
    never share state. Callers sharing one instance may run calls
    concurrently: records are never modified in place.
    """

    def __init__(
        self,
        settings: FarmqcSettings | None = None,
        custom_rules: Iterable[CustomRule] | None = None,
    ) -> None:
        """Initialize DataValidationEngine.

        Args:
            settings: Engine settings, defaults to the global settings
            custom_rules: Custom rule table, defaults to the built-in rules
        """
        self.settings = settings or get_settings()
        self.evaluator = RuleEvaluator(
            custom_rules=custom_rules,
            report_unknown_fields=self.settings.report_unknown_fields,
        )
        self.tracker = ValidationTracker(capacity=self.settings.history_capacity)

    async def validate_data(
        self,
        record: dict[str, Any],
        context: ValidationContext,
    ) -> ValidationResult:
        """Validate one record.

        A cached result for an identical (record, context) pair is
        returned as the same object, with its original processing time.

        Args:
            record: Record to validate
            context: Validation context; its ``record`` is replaced

        Returns:
            ValidationResult
        """
        return self._validate(record, context)

    async def validate_batch(
        self,
        records: list[dict[str, Any]],
        context: ValidationContext,
    ) -> list[BatchItem]:
        """Validate records one at a time, in order.

        Records are independent: no cross-record constraint is checked.

        Args:
            records: Records to validate
            context: Shared context; each record is attached in turn

        Returns:
            One BatchItem per record, in input order
        """
        items: list[BatchItem] = []
        with LogContext(logger, entity_kind=context.entity_kind.value, batch_size=len(records)):
            for index, record in enumerate(records):
                items.append(BatchItem(index=index, result=self._validate(record, context)))
            invalid = sum(1 for item in items if not item.result.is_valid)
            logger.info(f"Validated batch of {len(items)} records ({invalid} invalid)")
        return items

    def auto_fix_data(
        self,
        record: dict[str, Any],
        findings: Iterable[Finding],
    ) -> dict[str, Any]:
        """Apply deterministic fixes for auto-fixable findings (copy-on-write)."""
        return auto_fix_data(record, findings)

    def get_fix_suggestions(self, finding: Finding | str) -> list[str]:
        """Fix hints for a finding or finding code."""
        return get_fix_suggestions(finding)

    def get_validation_stats(self) -> ValidationStats:
        """Statistics over the retained history."""
        return self.tracker.stats()

    def clear_cache(self) -> None:
        """Drop all cached results."""
        self.tracker.clear_cache()
        logger.debug("Validation cache cleared")

    def _cache_key(self, record: dict[str, Any], context: ValidationContext) -> str | None:
        if not self.settings.cache_enabled:
            return None
        try:
            return canonical_key(record, context)
        except (TypeError, ValueError) as e:
            logger.warning(f"Record cannot be cached: {e}")
            return None

    def _validate(self, record: dict[str, Any], context: ValidationContext) -> ValidationResult:
        context = replace(context, record=record)
        key = self._cache_key(record, context)
        if key is not None:
            cached = self.tracker.get(key)
            if cached is not None:
                logger.debug(f"Cache hit for {context.entity_kind.value} record")
                return cached

        start = time.perf_counter()
        outcome = self.evaluator.evaluate(record, context)

        result = ValidationResult(
            auto_fixes_applied=outcome.auto_fixes_applied,
            record=outcome.record,
        )
        for finding in outcome.findings:
            result.add(finding)

        scores = score_findings(outcome.record, result.errors, result.warnings, result.suggestions)
        result.data_insights = scores.insights
        result.quality_score = scores.quality_score
        result.confidence = scores.confidence
        result.processing_time_ms = (time.perf_counter() - start) * 1000

        if key is not None:
            self.tracker.store(key, result)
        self.tracker.record(context, result)

        logger.debug(
            f"Validated {context.entity_kind.value} record for "
            f"{context.operation_kind.value}: {len(result.errors)} errors, "
            f"{len(result.warnings)} warnings, quality {result.quality_score}"
        )
        return result
