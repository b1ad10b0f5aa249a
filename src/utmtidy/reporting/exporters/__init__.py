"""Serializers for cleaned URLs and pipeline results."""

from typing import Optional, Union

from utmtidy.core.constants import ExportFormat
from utmtidy.core.exceptions import ExportError
from utmtidy.core.models import ParsedUrl
from utmtidy.reporting.exporters.tabular import (
    CSVExporter,
    OriginalShape,
    TSVExporter,
    to_csv,
    to_tsv,
)
from utmtidy.reporting.exporters.text import URLListExporter, reconstruct_url, to_url_list

Exporter = Union[URLListExporter, TSVExporter, CSVExporter]


def get_exporter(fmt: Union[ExportFormat, str], original_shape: Optional[OriginalShape] = None) -> Exporter:
    """Return the exporter for a format name.

    Raises:
        ExportError: If the format is not supported
    """
    try:
        export_format = ExportFormat(fmt)
    except ValueError:
        supported = ", ".join(f.value for f in ExportFormat)
        raise ExportError(f"Unsupported export format '{fmt}'. Use one of: {supported}") from None

    if export_format == ExportFormat.TSV:
        return TSVExporter(original_shape)
    if export_format == ExportFormat.CSV:
        return CSVExporter()
    return URLListExporter()


def export_rows(rows: list[ParsedUrl], fmt: Union[ExportFormat, str]) -> str:
    """Render rows in the given text format."""
    return get_exporter(fmt).render(rows)


__all__ = [
    "CSVExporter",
    "OriginalShape",
    "TSVExporter",
    "URLListExporter",
    "export_rows",
    "get_exporter",
    "reconstruct_url",
    "to_csv",
    "to_tsv",
    "to_url_list",
]
