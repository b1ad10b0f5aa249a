"""Pipeline orchestrator for UTM link review.

This module provides the PipelineOrchestrator class that takes raw
pasted text through mode detection, row extraction, parsing, linting,
cleaning and diffing, and aggregates the per-row results.

Rows are processed independently and in input order; the same input and
ruleset always yield the same result.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from utmtidy.classifier.differ import DiffClassifier
from utmtidy.classifier.linter import LintEngine
from utmtidy.classifier.normalizer import URLNormalizer
from utmtidy.classifier.suggester import suggest_semantic_fixes
from utmtidy.core.constants import InputMode
from utmtidy.core.exceptions import PipelineError
from utmtidy.core.models import LintIssue, ParsedUrl, ParseRow, Patch, RulesetConfig
from utmtidy.ingest.detector import detect_input_mode
from utmtidy.ingest.parser import parse_url_row
from utmtidy.ingest.tsv import detect_likely_url_columns, parse_tsv_range


logger = logging.getLogger(__name__)


@dataclass
class PipelineConfig:
    """Configuration for pipeline execution.

    Attributes:
        ruleset: Lint and cleaning rules
        max_rows: Cap on URLs processed; None means unbounded
        url_column: TSV column holding URLs; None means auto-detect
        suggest: Append allow-list suggestions to each row's patches
    """
    ruleset: RulesetConfig = field(default_factory=RulesetConfig)
    max_rows: Optional[int] = None
    url_column: Optional[int] = None
    suggest: bool = False

    def __post_init__(self) -> None:
        if self.max_rows is not None and self.max_rows < 0:
            raise PipelineError(f"max_rows must be non-negative, got {self.max_rows}")
        if self.url_column is not None and self.url_column < 0:
            raise PipelineError(f"url_column must be non-negative, got {self.url_column}")


@dataclass
class ExtractedRow:
    """Raw URL text and the source cells it came from."""
    raw_url: str
    cells: tuple[str, ...]


@dataclass
class PipelineResult:
    """Aggregated output of one pipeline invocation."""
    mode: InputMode
    rows: list[ParseRow] = field(default_factory=list)
    all_issues: list[LintIssue] = field(default_factory=list)
    all_patches: list[Patch] = field(default_factory=list)
    cleaned_urls: list[ParsedUrl] = field(default_factory=list)
    url_columns: list[int] = field(default_factory=list)
    total_rows: int = 0
    truncated: bool = False

    @property
    def has_errors(self) -> bool:
        """Check if any row raised an Error-severity issue."""
        return any(row.has_errors for row in self.rows)


class PipelineOrchestrator:
    """Run pasted text through the full review pipeline."""

    def __init__(self, config: Optional[PipelineConfig] = None):
        """Initialize orchestrator.

        Args:
            config: Pipeline configuration (defaults when None)
        """
        self.config = config or PipelineConfig()
        self.linter = LintEngine(self.config.ruleset)
        self.normalizer = URLNormalizer(self.config.ruleset)
        self.differ = DiffClassifier(self.config.ruleset)

    def extract_rows(self, input_raw: str, mode: InputMode) -> tuple[list[ExtractedRow], list[int]]:
        """Pull raw URL strings out of pasted text.

        Args:
            input_raw: Raw pasted text
            mode: Detected input mode

        Returns:
            Tuple of extracted rows and detected URL columns (TSV only)
        """
        if mode == InputMode.TSV_RANGE:
            tsv_rows = parse_tsv_range(input_raw)
            url_columns = detect_likely_url_columns(tsv_rows)
            if self.config.url_column is not None:
                column = self.config.url_column
            else:
                column = url_columns[0] if url_columns else 0
            logger.debug(f"TSV range: {len(tsv_rows)} rows, URL columns {url_columns}, using {column}")

            extracted = []
            for row in tsv_rows:
                cell = row[column].strip() if column < len(row) else ""
                if cell:
                    extracted.append(ExtractedRow(raw_url=cell, cells=tuple(row)))
            return extracted, url_columns

        extracted = [
            ExtractedRow(raw_url=line.strip(), cells=(line.strip(),))
            for line in input_raw.split("\n")
            if line.strip()
        ]
        return extracted, []

    def process_row(self, raw_url: str, row_index: int, cells: tuple[str, ...] = ()) -> ParseRow:
        """Parse, lint, clean and diff a single URL.

        Args:
            raw_url: URL text
            row_index: Position among processed rows
            cells: Source cells for the row (defaults to the URL alone)

        Returns:
            ParseRow holding the cleaned URL, its issues and its patches
        """
        parsed = parse_url_row(raw_url)
        if parsed.parse_error:
            logger.warning(f"Row {row_index}: {parsed.parse_error}")

        issues = self.linter.lint(parsed, row_index)
        cleaned = self.normalizer.normalize(parsed)
        patches = self.differ.diff(parsed, cleaned, row_index)

        if self.config.suggest:
            patches.extend(suggest_semantic_fixes(parsed, self.config.ruleset, row_index))

        return ParseRow(
            row_index=row_index,
            cells=cells or (raw_url,),
            url=cleaned,
            issues=tuple(issues),
            patches=tuple(patches),
        )

    def run(self, input_raw: str) -> PipelineResult:
        """Execute the pipeline on pasted text.

        Args:
            input_raw: Raw pasted text (URL list or TSV range)

        Returns:
            PipelineResult with per-row results and flattened issues and
            patches
        """
        mode = detect_input_mode(input_raw)
        extracted, url_columns = self.extract_rows(input_raw, mode)

        result = PipelineResult(mode=mode, url_columns=url_columns, total_rows=len(extracted))

        max_rows = self.config.max_rows
        if max_rows is not None and len(extracted) > max_rows:
            logger.info(f"Row cap reached: processing {max_rows} of {len(extracted)} rows")
            extracted = extracted[:max_rows]
            result.truncated = True

        logger.info(f"Processing {len(extracted)} rows ({mode.value})")

        for row_index, row in enumerate(extracted):
            parse_row = self.process_row(row.raw_url, row_index, row.cells)
            result.rows.append(parse_row)
            result.all_issues.extend(parse_row.issues)
            result.all_patches.extend(parse_row.patches)
            result.cleaned_urls.append(parse_row.url)

        logger.info(
            f"Pipeline completed: {len(result.rows)} rows, "
            f"{len(result.all_issues)} issues, {len(result.all_patches)} patches"
        )
        return result


def run_pipeline(
    input_raw: str,
    ruleset: Optional[RulesetConfig] = None,
    *,
    max_rows: Optional[int] = None,
    url_column: Optional[int] = None,
    suggest: bool = False,
) -> PipelineResult:
    """Run the review pipeline over pasted text.

    Args:
        input_raw: Raw pasted text
        ruleset: Ruleset to apply (defaults when None)
        max_rows: Optional cap on processed URLs
        url_column: Optional TSV URL column override
        suggest: Include allow-list suggestions in row patches

    Returns:
        PipelineResult
    """
    config = PipelineConfig(
        ruleset=ruleset or RulesetConfig(),
        max_rows=max_rows,
        url_column=url_column,
        suggest=suggest,
    )
    return PipelineOrchestrator(config).run(input_raw)
