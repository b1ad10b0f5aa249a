"""Constants used throughout utmtidy.

This module contains enums, default values, and static patterns
to ensure consistency across the application.
"""

import re
from enum import Enum


class InputMode(str, Enum):
    """Shape of pasted input text."""
    URL_LIST = "URL_LIST"
    TSV_RANGE = "TSV_RANGE"


class Severity(str, Enum):
    """Lint issue severity levels."""
    ERROR = "Error"
    WARNING = "Warning"
    INFO = "Info"


class PatchKind(str, Enum):
    """Classification of a before/after change."""
    SAFE = "SAFE"
    SEMANTIC = "SEMANTIC"
    ERROR = "ERROR"


class CaseRule(str, Enum):
    """Expected casing of UTM values."""
    LOWER = "lower"
    UPPER = "upper"
    NONE = "none"


class StrictMode(str, Enum):
    """Enforcement level for allow-list membership."""
    OFF = "off"
    WARN = "warn"
    BLOCK = "block"


class MissingSeverity(str, Enum):
    """Severity applied to missing or empty required parameters."""
    ERROR = "error"
    WARN = "warn"


class ExportFormat(str, Enum):
    """Supported text export formats."""
    URL_LIST = "url_list"
    TSV = "tsv"
    CSV = "csv"


class IssueCode(str, Enum):
    """Stable lint issue identifiers."""
    MALFORMED_URL = "MALFORMED_URL"
    DUPLICATE_UTM_KEY = "DUPLICATE_UTM_KEY"
    MISSING_REQUIRED_PARAM = "MISSING_REQUIRED_PARAM"
    EMPTY_REQUIRED_VALUE = "EMPTY_REQUIRED_VALUE"
    STRICT_VALUE_VIOLATION = "STRICT_VALUE_VIOLATION"
    CASING_DRIFT = "CASING_DRIFT"
    ILLEGAL_CHARS = "ILLEGAL_CHARS"
    UTM_LIKE_KEY = "UTM_LIKE_KEY"
    INTERNAL_LINK_UTM = "INTERNAL_LINK_UTM"


# Sort order applied by the cleaner; unknown keys go last
CANONICAL_UTM_ORDER = (
    "utm_source",
    "utm_medium",
    "utm_campaign",
    "utm_content",
    "utm_term",
)

# Keys checked against allow-lists, mapped to the RulesetConfig field
ALLOW_LIST_FIELDS = {
    "utm_source": "allowed_sources",
    "utm_medium": "allowed_mediums",
    "utm_campaign": "allowed_campaigns",
}

URL_PATTERN = re.compile(r"^https?://", re.IGNORECASE)
UTM_KEY_PATTERN = re.compile(r"^utm_", re.IGNORECASE)
ILLEGAL_CHARS_PATTERN = re.compile(r"[\s<>{}|\\^`\[\]]")
WHITESPACE_RUN_PATTERN = re.compile(r"\s+")

UTM_LIKE_KEY_PATTERNS = tuple(
    re.compile(rf"^utm{sep}{name}$", re.IGNORECASE)
    for sep in ("", "-")
    for name in ("source", "medium", "campaign", "content", "term")
)


# Application defaults
DEFAULTS = {
    "ruleset_name": "Default",
    "required_params": ("utm_source", "utm_medium", "utm_campaign"),
    "draft_ttl_seconds": 24 * 60 * 60,
    "mode_ratio_threshold": 0.5,
    "url_column_ratio_threshold": 0.5,
    "max_fuzzy_length": 256,
}
