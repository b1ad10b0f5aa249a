"""UTM URL normalization.

This module provides the cleaning pass applied to every parsed URL. It
handles:
- Whitespace trimming of UTM keys and values
- Whitespace runs in values collapsed to underscores
- Key lowercasing and value casing per the ruleset
- Canonical UTM parameter ordering
- Trailing slash removal
- Optional fragment removal

Cleaning is idempotent: cleaning a cleaned URL returns an equal value.
"""

from dataclasses import replace

from utmtidy.core.constants import CANONICAL_UTM_ORDER, CaseRule, WHITESPACE_RUN_PATTERN
from utmtidy.core.models import ParsedUrl, RulesetConfig, UtmParam


class URLNormalizer:
    """Normalize parsed URLs under a ruleset.

    Normalization steps, in order:
    1. Trim UTM keys and values (when trim_whitespace is set)
    2. Replace whitespace runs in values with a single underscore
    3. Lowercase keys; lower/upper-case values per case_rule
    4. Stable-sort UTM params into canonical order
    5. Remove trailing slashes from the path (except root)
    6. Clear the fragment (when strip_fragment is set)
    """

    def __init__(self, ruleset: RulesetConfig):
        """Initialize URLNormalizer.

        Args:
            ruleset: Ruleset providing the cleaning options
        """
        self.ruleset = ruleset

    def normalize(self, parsed: ParsedUrl) -> ParsedUrl:
        """Normalize a single parsed URL.

        Args:
            parsed: URL to normalize

        Returns:
            New ParsedUrl; the input is returned unchanged if it failed
            to parse
        """
        if parsed.parse_error:
            return parsed

        utm_params = [self._normalize_param(p) for p in parsed.utm_params]
        utm_params.sort(key=self._sort_key)

        return replace(
            parsed,
            pathname=self._normalize_path(parsed.pathname),
            utm_params=utm_params,
            other_params=dict(parsed.other_params),
            fragment="" if self.ruleset.strip_fragment else parsed.fragment,
            duplicate_keys=list(parsed.duplicate_keys),
        )

    def normalize_batch(self, urls: list[ParsedUrl]) -> list[ParsedUrl]:
        """Normalize a batch of parsed URLs, preserving order."""
        return [self.normalize(url) for url in urls]

    def _normalize_param(self, param: UtmParam) -> UtmParam:
        key = param.key
        value = param.value

        if self.ruleset.trim_whitespace:
            key = key.strip()
            value = value.strip()

        value = WHITESPACE_RUN_PATTERN.sub("_", value)

        key = key.lower()
        if self.ruleset.case_rule == CaseRule.LOWER:
            value = value.lower()
        elif self.ruleset.case_rule == CaseRule.UPPER:
            value = value.upper()

        return replace(param, key=key, value=value)

    @staticmethod
    def _sort_key(param: UtmParam) -> tuple[int, str]:
        try:
            rank = CANONICAL_UTM_ORDER.index(param.key)
        except ValueError:
            rank = len(CANONICAL_UTM_ORDER)
        return rank, param.key

    @staticmethod
    def _normalize_path(path: str) -> str:
        # All trailing slashes go in one pass so cleaning stays idempotent
        if len(path) > 1 and path.endswith("/"):
            return path.rstrip("/")
        return path


def clean_formatting(parsed: ParsedUrl, ruleset: RulesetConfig) -> ParsedUrl:
    """Apply the ruleset's formatting normalization to one parsed URL."""
    return URLNormalizer(ruleset).normalize(parsed)
