"""Rule-based linting of parsed URLs.

Each rule inspects a ParsedUrl under a RulesetConfig and reports zero or
more LintIssues. Rules are independent: a row accumulates every issue
that applies, and per-parameter rules fire once per matching parameter.
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional

from utmtidy.core.constants import (
    ALLOW_LIST_FIELDS,
    CaseRule,
    ILLEGAL_CHARS_PATTERN,
    IssueCode,
    Severity,
    StrictMode,
    UTM_LIKE_KEY_PATTERNS,
)
from utmtidy.core.models import LintIssue, ParsedUrl, RulesetConfig

RuleCheck = Callable[[ParsedUrl, RulesetConfig, int], list[LintIssue]]

_UTM_PREFIX = re.compile(r"^utm[-_]?", re.IGNORECASE)
_WWW_PREFIX = re.compile(r"^www\.")

_ALLOW_LIST_LABELS = {
    "utm_source": "sources",
    "utm_medium": "mediums",
    "utm_campaign": "campaigns",
}


@dataclass(frozen=True)
class LintRule:
    """Named lint rule bound to a stable issue code."""
    name: str
    code: IssueCode
    check: RuleCheck
    description: str = ""

    def evaluate(self, parsed: ParsedUrl, ruleset: RulesetConfig, row_index: int) -> list[LintIssue]:
        return self.check(parsed, ruleset, row_index)


def _issue(row_index: int, field: str, severity: Severity, code: IssueCode, message: str) -> LintIssue:
    return LintIssue(
        row_index=row_index,
        field=field,
        severity=severity,
        code=code.value,
        message=message,
    )


# ============================================================================
# Rule Checks
# ============================================================================

def check_duplicate_keys(parsed: ParsedUrl, ruleset: RulesetConfig, row_index: int) -> list[LintIssue]:
    issues = []
    for key in parsed.duplicate_keys:
        values = parsed.values_for(key)
        if not values:
            continue
        if all(v == values[0] for v in values):
            issues.append(_issue(
                row_index, key, Severity.WARNING, IssueCode.DUPLICATE_UTM_KEY,
                f'Duplicate key "{key}" with identical value "{values[0]}"',
            ))
        else:
            quoted = ", ".join(f'"{v}"' for v in values)
            issues.append(_issue(
                row_index, key, Severity.ERROR, IssueCode.DUPLICATE_UTM_KEY,
                f'Conflicting duplicate key "{key}" with values: {quoted}',
            ))
    return issues


def check_missing_required(parsed: ParsedUrl, ruleset: RulesetConfig, row_index: int) -> list[LintIssue]:
    present = set(parsed.utm_keys())
    return [
        _issue(
            row_index, required, ruleset.missing_severity, IssueCode.MISSING_REQUIRED_PARAM,
            f'Required parameter "{required}" is missing',
        )
        for required in ruleset.required_params
        if required not in present
    ]


def check_empty_required(parsed: ParsedUrl, ruleset: RulesetConfig, row_index: int) -> list[LintIssue]:
    return [
        _issue(
            row_index, param.key, ruleset.missing_severity, IssueCode.EMPTY_REQUIRED_VALUE,
            f'Required parameter "{param.key}" has an empty value',
        )
        for param in parsed.utm_params
        if param.key in ruleset.required_params and not param.value.strip()
    ]


def check_strict_values(parsed: ParsedUrl, ruleset: RulesetConfig, row_index: int) -> list[LintIssue]:
    if ruleset.strict_mode == StrictMode.OFF:
        return []

    severity = Severity.ERROR if ruleset.strict_mode == StrictMode.BLOCK else Severity.WARNING
    issues = []

    for key in ALLOW_LIST_FIELDS:
        allowed = ruleset.allow_list_for(key)
        if not allowed:
            continue
        allowed_lower = {a.lower() for a in allowed}
        for param in parsed.utm_params:
            if param.key == key and param.value.lower() not in allowed_lower:
                issues.append(_issue(
                    row_index, key, severity, IssueCode.STRICT_VALUE_VIOLATION,
                    f'Value "{param.value}" is not in the allowed {_ALLOW_LIST_LABELS[key]} list',
                ))
    return issues


def check_casing(parsed: ParsedUrl, ruleset: RulesetConfig, row_index: int) -> list[LintIssue]:
    if ruleset.case_rule == CaseRule.NONE:
        return []

    issues = []
    for param in parsed.utm_params:
        value = param.value
        if not value:
            continue
        expected = value.lower() if ruleset.case_rule == CaseRule.LOWER else value.upper()
        if value != expected:
            issues.append(_issue(
                row_index, param.key, Severity.WARNING, IssueCode.CASING_DRIFT,
                f'Value "{value}" does not match expected {ruleset.case_rule.value}case: "{expected}"',
            ))
    return issues


def check_illegal_chars(parsed: ParsedUrl, ruleset: RulesetConfig, row_index: int) -> list[LintIssue]:
    return [
        _issue(
            row_index, param.key, Severity.WARNING, IssueCode.ILLEGAL_CHARS,
            f'Value "{param.value}" contains spaces or illegal characters',
        )
        for param in parsed.utm_params
        if ILLEGAL_CHARS_PATTERN.search(param.value)
    ]


def check_utm_like_keys(parsed: ParsedUrl, ruleset: RulesetConfig, row_index: int) -> list[LintIssue]:
    issues = []
    for raw_key in parsed.other_params:
        if any(pattern.match(raw_key) for pattern in UTM_LIKE_KEY_PATTERNS):
            suggestion = "utm_" + _UTM_PREFIX.sub("", raw_key)
            issues.append(_issue(
                row_index, raw_key, Severity.WARNING, IssueCode.UTM_LIKE_KEY,
                f'Non-standard UTM-like key "{raw_key}" found, did you mean "{suggestion}"?',
            ))
    return issues


def check_internal_link(parsed: ParsedUrl, ruleset: RulesetConfig, row_index: int) -> list[LintIssue]:
    if not ruleset.host_domain or not parsed.host:
        return []

    host = _WWW_PREFIX.sub("", parsed.host.lower())
    domain = _WWW_PREFIX.sub("", ruleset.host_domain.lower())
    if host != domain:
        return []

    return [_issue(
        row_index, "host", Severity.WARNING, IssueCode.INTERNAL_LINK_UTM,
        f'URL host "{parsed.host}" matches your own domain; UTM params on internal links pollute analytics',
    )]


# ============================================================================
# Lint Engine
# ============================================================================

class LintEngine:
    """Evaluate parsed URLs against a ruleset.

    Rules run in a fixed order so issue lists are deterministic:
    duplicates, missing required, empty required, strict values, casing,
    illegal characters, UTM-like keys, internal links.
    """

    def __init__(self, ruleset: RulesetConfig, *, custom_rules: Optional[list[LintRule]] = None):
        """Initialize LintEngine.

        Args:
            ruleset: Ruleset the rules read their options from
            custom_rules: Additional rules evaluated after the defaults
        """
        self.ruleset = ruleset
        self.rules = self._create_default_rules()

        if custom_rules:
            self.rules.extend(custom_rules)

    def _create_default_rules(self) -> list[LintRule]:
        return [
            LintRule("duplicate_keys", IssueCode.DUPLICATE_UTM_KEY, check_duplicate_keys,
                     "UTM key occurs more than once"),
            LintRule("missing_required", IssueCode.MISSING_REQUIRED_PARAM, check_missing_required,
                     "Required UTM key is absent"),
            LintRule("empty_required", IssueCode.EMPTY_REQUIRED_VALUE, check_empty_required,
                     "Required UTM key has a blank value"),
            LintRule("strict_values", IssueCode.STRICT_VALUE_VIOLATION, check_strict_values,
                     "UTM value outside its allow-list"),
            LintRule("casing", IssueCode.CASING_DRIFT, check_casing,
                     "UTM value differs from the expected case"),
            LintRule("illegal_chars", IssueCode.ILLEGAL_CHARS, check_illegal_chars,
                     "UTM value contains whitespace or unsafe characters"),
            LintRule("utm_like_keys", IssueCode.UTM_LIKE_KEY, check_utm_like_keys,
                     "Near-miss spelling of a UTM key"),
            LintRule("internal_link", IssueCode.INTERNAL_LINK_UTM, check_internal_link,
                     "UTM tags on a link to the site's own domain"),
        ]

    def lint(self, parsed: ParsedUrl, row_index: int = 0) -> list[LintIssue]:
        """Lint a single parsed URL.

        Args:
            parsed: URL to lint
            row_index: Row position reported on each issue

        Returns:
            Issues found; a URL that failed to parse yields exactly one
            MALFORMED_URL error
        """
        if parsed.parse_error:
            return [_issue(
                row_index, "url", Severity.ERROR, IssueCode.MALFORMED_URL, parsed.parse_error,
            )]

        issues: list[LintIssue] = []
        for rule in self.rules:
            issues.extend(rule.evaluate(parsed, self.ruleset, row_index))
        return issues


def lint_row(parsed: ParsedUrl, ruleset: RulesetConfig, row_index: int = 0) -> list[LintIssue]:
    """Lint one parsed URL with the default rules."""
    return LintEngine(ruleset).lint(parsed, row_index)
