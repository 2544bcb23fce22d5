"""Validation layer for farmqc.

This module provides the record validation pipeline:
- Schema registry: per-entity field rules
- Custom rules: cross-field business rules
- Rule evaluator, quality scorer and auto-fix engine
- DataValidationEngine: cached, history-tracking entry point
"""

from farmqc.validate.autofix import auto_fix_data, get_fix_suggestions
from farmqc.validate.engine import DataValidationEngine
from farmqc.validate.evaluator import Evaluation, RuleEvaluator
from farmqc.validate.history import ValidationTracker, canonical_key
from farmqc.validate.importer import ImportReport, ImportRow, validate_import
from farmqc.validate.registry import FieldRule, rules_for
from farmqc.validate.rules import CUSTOM_RULES, CustomRule, rules_applicable_to
from farmqc.validate.scoring import QualityScores, score_findings

__all__ = [
    # Engine
    "DataValidationEngine",
    # Registry
    "FieldRule",
    "rules_for",
    # Custom rules
    "CUSTOM_RULES",
    "CustomRule",
    "rules_applicable_to",
    # Evaluation
    "Evaluation",
    "RuleEvaluator",
    # Scoring
    "QualityScores",
    "score_findings",
    # Auto-fix
    "auto_fix_data",
    "get_fix_suggestions",
    # Cache & history
    "ValidationTracker",
    "canonical_key",
    # Import
    "ImportReport",
    "ImportRow",
    "validate_import",
]
