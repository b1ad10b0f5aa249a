"""Tab-separated range parsing and URL column detection.

Spreadsheet ranges pasted as text are tab-delimited, with double quotes
wrapping cells that contain tabs, newlines or quotes (a doubled quote is
a literal quote). Cell contents are preserved verbatim, including
surrounding whitespace and trailing empty columns.
"""

import csv
import io

from utmtidy.core.constants import DEFAULTS, URL_PATTERN


def parse_tsv_range(input_raw: str) -> list[list[str]]:
    """Tokenize pasted TSV text into rows of cells.

    Args:
        input_raw: Raw pasted text

    Returns:
        Rows in input order; rows whose cells are all blank are dropped.
        Rows may have differing lengths.
    """
    if not input_raw:
        return []

    # A single cell may span the whole paste; the limit is process-wide
    csv.field_size_limit(max(csv.field_size_limit(), len(input_raw) + 1))

    reader = csv.reader(
        io.StringIO(input_raw, newline=""),
        delimiter="\t",
        quotechar='"',
        doublequote=True,
        skipinitialspace=False,
        strict=False,
    )

    return [row for row in reader if any(cell.strip() for cell in row)]


def detect_likely_url_columns(rows: list[list[str]]) -> list[int]:
    """Guess which columns hold URLs.

    A column qualifies when it has at least one non-empty cell and at
    least half of its non-empty cells start with http:// or https://.

    Args:
        rows: Parsed TSV rows

    Returns:
        Qualifying column indices in ascending order
    """
    if not rows:
        return []

    max_cols = max(len(row) for row in rows)
    threshold = DEFAULTS["url_column_ratio_threshold"]
    url_columns = []

    for col in range(max_cols):
        non_empty = 0
        url_count = 0
        for row in rows:
            cell = row[col].strip() if col < len(row) else ""
            if not cell:
                continue
            non_empty += 1
            if URL_PATTERN.match(cell):
                url_count += 1

        if non_empty > 0 and url_count / non_empty >= threshold:
            url_columns.append(col)

    return url_columns
