"""UTM linting, normalization, suggestion and diff classification.

This package provides the per-row processing stages:
- LintEngine / lint_row: Evaluate a parsed URL against a ruleset
- URLNormalizer / clean_formatting: Deterministic, idempotent cleaning
- suggest_semantic_fixes: Fuzzy allow-list corrections
- DiffClassifier / diff_rows: Classify original vs cleaned differences
"""

from utmtidy.classifier.linter import LintEngine, LintRule, lint_row
from utmtidy.classifier.normalizer import URLNormalizer, clean_formatting
from utmtidy.classifier.suggester import find_closest_match, suggest_semantic_fixes
from utmtidy.classifier.differ import DiffClassifier, classify_change, diff_rows

__all__ = [
    "LintEngine",
    "LintRule",
    "lint_row",
    "URLNormalizer",
    "clean_formatting",
    "find_closest_match",
    "suggest_semantic_fixes",
    "DiffClassifier",
    "classify_change",
    "diff_rows",
]
