"""TSV and CSV export of cleaned URLs.

Both formats share one column model: a ``url`` column followed by the
sorted union of UTM keys present across all rows. A row lacking a key
gets an empty cell; with duplicate keys the first stored value is used.
"""

import csv
import io
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from utmtidy.core.exceptions import ExportError
from utmtidy.core.models import ParsedUrl
from utmtidy.reporting.exporters.text import reconstruct_url


@dataclass(frozen=True)
class OriginalShape:
    """Header layout of the spreadsheet range the URLs came from."""
    headers: tuple[str, ...]
    url_column_index: int


def collect_utm_columns(rows: list[ParsedUrl]) -> list[str]:
    """Sorted union of UTM keys across rows."""
    keys = {param.key for row in rows for param in row.utm_params}
    return sorted(keys)


def _first_value(row: ParsedUrl, key: str) -> str:
    for param in row.utm_params:
        if param.key == key:
            return param.value
    return ""


def build_table(rows: list[ParsedUrl]) -> list[list[str]]:
    """Header row plus one row per URL."""
    utm_columns = collect_utm_columns(rows)
    table = [["url", *utm_columns]]
    for row in rows:
        table.append([reconstruct_url(row), *(_first_value(row, key) for key in utm_columns)])
    return table


def to_tsv(rows: list[ParsedUrl], original_shape: Optional[OriginalShape] = None) -> str:
    """Serialize rows as tab-joined lines.

    Args:
        rows: Parsed URLs to export
        original_shape: When given, reuse the source headers and place
            each URL in the source URL column, leaving other cells blank

    Returns:
        TSV text without a trailing newline
    """
    if original_shape is not None:
        width = len(original_shape.headers)
        lines = ["\t".join(original_shape.headers)]
        for row in rows:
            cells = [""] * width
            if 0 <= original_shape.url_column_index < width:
                cells[original_shape.url_column_index] = reconstruct_url(row)
            lines.append("\t".join(cells))
        return "\n".join(lines)

    return "\n".join("\t".join(cells) for cells in build_table(rows))


def to_csv(rows: list[ParsedUrl]) -> str:
    """Serialize rows as CSV.

    Values containing a comma, quote or newline are wrapped in quotes
    with inner quotes doubled.

    Returns:
        CSV text without a trailing newline
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=",", quotechar='"', quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    for cells in build_table(rows):
        # csv quotes a lone empty field; write it as a blank line instead
        if cells == [""]:
            buffer.write("\n")
        else:
            writer.writerow(cells)
    # Every record ends with exactly one terminator
    return buffer.getvalue()[:-1]


class TSVExporter:
    """Export cleaned URLs as TSV."""

    def __init__(self, original_shape: Optional[OriginalShape] = None):
        self.original_shape = original_shape

    def render(self, rows: list[ParsedUrl]) -> str:
        return to_tsv(rows, self.original_shape)

    def export(self, rows: list[ParsedUrl], output_path: Path) -> None:
        try:
            output_path.write_text(self.render(rows) + "\n", encoding="utf-8")
        except OSError as e:
            raise ExportError(f"Failed to write TSV to {output_path}: {e}") from e


class CSVExporter:
    """Export cleaned URLs as CSV."""

    def render(self, rows: list[ParsedUrl]) -> str:
        return to_csv(rows)

    def export(self, rows: list[ParsedUrl], output_path: Path) -> None:
        try:
            output_path.write_text(self.render(rows) + "\n", encoding="utf-8")
        except OSError as e:
            raise ExportError(f"Failed to write CSV to {output_path}: {e}") from e
