"""JSON exporter for utmtidy.

This module provides JSON export of a full pipeline result, with custom
encoding for enum, datetime and model types.
"""

import json
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from utmtidy.core.exceptions import ExportError
from utmtidy.reporting.exporters.text import reconstruct_url
from utmtidy.reporting.generator import build_summary

if TYPE_CHECKING:
    from utmtidy.orchestrator.pipeline import PipelineResult


class ResultJSONEncoder(json.JSONEncoder):
    """Custom JSON encoder for pipeline objects.

    Handles serialization of datetime, Enum, Path and model objects.
    """

    def default(self, o):
        if isinstance(o, datetime):
            return o.isoformat()

        if isinstance(o, Enum):
            return o.value

        if isinstance(o, Path):
            return str(o)

        if hasattr(o, "to_dict"):
            return o.to_dict()

        return super().default(o)


def to_json(result: "PipelineResult", *, indent: int = 2) -> str:
    """Serialize a pipeline result as a JSON document.

    Args:
        result: Output of run_pipeline
        indent: Indentation level

    Returns:
        JSON text with summary, rows, issues, patches and cleaned URLs
    """
    data = {
        "summary": build_summary(result),
        "mode": result.mode,
        "urlColumns": result.url_columns,
        "rows": result.rows,
        "issues": result.all_issues,
        "patches": result.all_patches,
        "cleanedUrls": [reconstruct_url(url) for url in result.cleaned_urls],
    }
    return json.dumps(data, cls=ResultJSONEncoder, indent=indent, ensure_ascii=False)


class JSONExporter:
    """Export pipeline results to JSON format.

    Provides structured JSON output suitable for programmatic consumption
    and further processing.
    """

    def export(self, result: "PipelineResult", output_path: Path) -> None:
        """Export result to JSON file.

        Args:
            result: Pipeline result to export
            output_path: Path where JSON file will be written

        Raises:
            ExportError: If export fails
        """
        try:
            output_path.write_text(to_json(result), encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            raise ExportError(f"Failed to export JSON result: {e}") from e
