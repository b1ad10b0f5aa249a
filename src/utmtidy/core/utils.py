"""Core utility functions for utmtidy."""

from dataclasses import dataclass, field
from typing import Sequence

from utmtidy.core.constants import DEFAULTS, PatchKind, Severity
from utmtidy.core.models import LintIssue, Patch


def clamp_for_fuzzy(value: str) -> str:
    """Truncate pathological input before quadratic comparison."""
    return value[:DEFAULTS["max_fuzzy_length"]]


@dataclass
class IssueCounts:
    """Categorized lint issue and patch counts."""
    errors: int = 0
    warnings: int = 0
    info: int = 0
    by_code: dict[str, int] = field(default_factory=dict)
    safe: int = 0
    semantic: int = 0
    patch_errors: int = 0

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary."""
        return {
            "errors": self.errors,
            "warnings": self.warnings,
            "info": self.info,
            "byCode": dict(self.by_code),
            "safe": self.safe,
            "semantic": self.semantic,
            "patchErrors": self.patch_errors,
        }


def categorize(issues: Sequence[LintIssue], patches: Sequence[Patch] = ()) -> IssueCounts:
    """
    Count issues by severity and code, and patches by kind.

    Args:
        issues: Lint issues to count
        patches: Patches to count

    Returns:
        IssueCounts dataclass with totals for each category
    """
    counts = IssueCounts()

    for issue in issues:
        if issue.severity == Severity.ERROR:
            counts.errors += 1
        elif issue.severity == Severity.WARNING:
            counts.warnings += 1
        else:
            counts.info += 1
        counts.by_code[issue.code] = counts.by_code.get(issue.code, 0) + 1

    for patch in patches:
        if patch.kind == PatchKind.SAFE:
            counts.safe += 1
        elif patch.kind == PatchKind.SEMANTIC:
            counts.semantic += 1
        else:
            counts.patch_errors += 1

    return counts
