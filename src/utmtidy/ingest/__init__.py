"""Input ingestion: shape detection, TSV parsing and URL parsing.

This package turns pasted text into ParsedUrl values:
- detect_input_mode: URL list or TSV range
- parse_tsv_range / detect_likely_url_columns: spreadsheet ranges
- parse_url_row: one raw string into a ParsedUrl
"""

from utmtidy.ingest.detector import detect_input_mode
from utmtidy.ingest.parser import parse_url_row
from utmtidy.ingest.tsv import detect_likely_url_columns, parse_tsv_range

__all__ = [
    "detect_input_mode",
    "detect_likely_url_columns",
    "parse_tsv_range",
    "parse_url_row",
]
