"""Run summaries for utmtidy.

This module condenses a pipeline result into the counts shown by the CLI
and embedded in JSON exports.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING

from utmtidy.core.utils import IssueCounts, categorize

if TYPE_CHECKING:
    from utmtidy.orchestrator.pipeline import PipelineResult


@dataclass
class RunSummary:
    """Statistics for a processed batch."""
    mode: str
    total_rows: int = 0
    processed_rows: int = 0
    parse_errors: int = 0
    clean_rows: int = 0
    rows_with_errors: int = 0
    truncated: bool = False
    counts: IssueCounts = field(default_factory=IssueCounts)
    generated_at: datetime = field(default_factory=datetime.now)

    @property
    def has_errors(self) -> bool:
        """Check if any Error-severity issue was reported."""
        return self.counts.errors > 0

    @property
    def clean_percentage(self) -> float:
        """Share of processed rows with no issues, as a percentage."""
        if self.processed_rows == 0:
            return 0.0
        return (self.clean_rows / self.processed_rows) * 100

    def to_dict(self) -> dict[str, object]:
        return {
            "mode": self.mode,
            "totalRows": self.total_rows,
            "processedRows": self.processed_rows,
            "parseErrors": self.parse_errors,
            "cleanRows": self.clean_rows,
            "rowsWithErrors": self.rows_with_errors,
            "truncated": self.truncated,
            "counts": self.counts.to_dict(),
            "generatedAt": self.generated_at.isoformat(),
        }


def build_summary(result: "PipelineResult") -> RunSummary:
    """Build summary statistics for a pipeline result.

    Args:
        result: Output of run_pipeline

    Returns:
        RunSummary with row and issue counts
    """
    summary = RunSummary(
        mode=result.mode.value,
        total_rows=result.total_rows,
        processed_rows=len(result.rows),
        truncated=result.truncated,
        counts=categorize(result.all_issues, result.all_patches),
    )

    for row in result.rows:
        if row.url is not None and row.url.parse_error:
            summary.parse_errors += 1
        if not row.issues:
            summary.clean_rows += 1
        if row.has_errors:
            summary.rows_with_errors += 1

    return summary
