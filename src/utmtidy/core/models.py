"""Core data models for utmtidy.

This module defines the value types passed through the pipeline: parsed
URLs and their UTM parameters, the ruleset configuration, lint issues,
patches, per-row results, and draft payloads.
"""

from dataclasses import dataclass, field, fields
from typing import Any, Optional

from utmtidy.core.constants import (
    CaseRule,
    DEFAULTS,
    InputMode,
    MissingSeverity,
    PatchKind,
    Severity,
    StrictMode,
)


# ============================================================================
# URL Models
# ============================================================================

@dataclass(frozen=True)
class UtmParam:
    """Single UTM query parameter occurrence."""
    key: str                                # Lowercased canonical name
    value: str
    raw_key: str                            # Name as it appeared in the URL

    def to_dict(self) -> dict[str, str]:
        return {"key": self.key, "value": self.value, "rawKey": self.raw_key}


@dataclass
class ParsedUrl:
    """Structured view of one input URL.

    When ``parse_error`` is set every structural field is empty and
    downstream stages pass the value through untouched.
    """
    raw: str
    protocol: str = ""
    host: str = ""
    pathname: str = ""
    utm_params: list[UtmParam] = field(default_factory=list)
    other_params: dict[str, str] = field(default_factory=dict)
    fragment: str = ""
    duplicate_keys: list[str] = field(default_factory=list)
    parse_error: Optional[str] = None

    @property
    def is_valid(self) -> bool:
        """Check if the URL parsed successfully."""
        return self.parse_error is None

    def utm_keys(self) -> list[str]:
        """UTM keys in stored order, duplicates included."""
        return [p.key for p in self.utm_params]

    def values_for(self, key: str) -> list[str]:
        """All values stored under a UTM key, in order."""
        return [p.value for p in self.utm_params if p.key == key]

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "raw": self.raw,
            "protocol": self.protocol,
            "host": self.host,
            "pathname": self.pathname,
            "utmParams": [p.to_dict() for p in self.utm_params],
            "otherParams": dict(self.other_params),
            "fragment": self.fragment,
            "duplicateKeys": list(self.duplicate_keys),
        }
        if self.parse_error is not None:
            data["parseError"] = self.parse_error
        return data


# ============================================================================
# Ruleset Configuration Model
# ============================================================================

# JSON wire names used by persisted rulesets
_WIRE_NAMES = {
    "id": "id",
    "name": "name",
    "required_params": "requiredParams",
    "missing_required_severity": "missingRequiredSeverity",
    "allowed_sources": "allowedSources",
    "allowed_mediums": "allowedMediums",
    "allowed_campaigns": "allowedCampaigns",
    "case_rule": "caseRule",
    "trim_whitespace": "trimWhitespace",
    "strip_fragment": "stripFragment",
    "strict_mode": "strictMode",
    "host_domain": "hostDomain",
}


@dataclass(frozen=True)
class RulesetConfig:
    """Immutable lint and cleaning configuration.

    List-valued options are stored as tuples. An empty allow-list means
    the corresponding UTM value is unrestricted.
    """
    id: Optional[str] = None
    name: str = DEFAULTS["ruleset_name"]
    required_params: tuple[str, ...] = DEFAULTS["required_params"]
    missing_required_severity: MissingSeverity = MissingSeverity.ERROR
    allowed_sources: tuple[str, ...] = ()
    allowed_mediums: tuple[str, ...] = ()
    allowed_campaigns: tuple[str, ...] = ()
    case_rule: CaseRule = CaseRule.LOWER
    trim_whitespace: bool = True
    strip_fragment: bool = False
    strict_mode: StrictMode = StrictMode.OFF
    host_domain: Optional[str] = None

    def __post_init__(self) -> None:
        # Accept lists and plain strings from callers
        for name in ("required_params", "allowed_sources", "allowed_mediums", "allowed_campaigns"):
            value = getattr(self, name)
            if value is None:
                value = ()
            object.__setattr__(self, name, tuple(value))
        object.__setattr__(self, "case_rule", CaseRule(self.case_rule))
        object.__setattr__(self, "strict_mode", StrictMode(self.strict_mode))
        object.__setattr__(
            self, "missing_required_severity", MissingSeverity(self.missing_required_severity)
        )

    @property
    def missing_severity(self) -> Severity:
        """Lint severity for missing or empty required parameters."""
        if self.missing_required_severity == MissingSeverity.WARN:
            return Severity.WARNING
        return Severity.ERROR

    def allow_list_for(self, key: str) -> tuple[str, ...]:
        """Allow-list governing a UTM key (empty if none applies)."""
        if key == "utm_source":
            return self.allowed_sources
        if key == "utm_medium":
            return self.allowed_mediums
        if key == "utm_campaign":
            return self.allowed_campaigns
        return ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RulesetConfig":
        """Build a config from camelCase or snake_case keys.

        Absent keys take their defaults. Values are not validated here;
        see ``utmtidy.core.config.validate_ruleset_config``.
        """
        kwargs: dict[str, Any] = {}
        for attr, wire in _WIRE_NAMES.items():
            if wire in data:
                kwargs[attr] = data[wire]
            elif attr in data:
                kwargs[attr] = data[attr]
        return cls(**{k: v for k, v in kwargs.items() if v is not None or k in ("id", "host_domain")})

    def to_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys for JSON persistence."""
        data: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name in ("id", "host_domain") and value is None:
                continue
            if isinstance(value, tuple):
                value = list(value)
            elif isinstance(value, (CaseRule, StrictMode, MissingSeverity)):
                value = value.value
            data[_WIRE_NAMES[f.name]] = value
        return data


# ============================================================================
# Lint and Diff Models
# ============================================================================

@dataclass(frozen=True)
class LintIssue:
    """Rule violation found on a single row."""
    row_index: int
    field: str
    severity: Severity
    code: str                               # Stable identifier, e.g. MISSING_REQUIRED_PARAM
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "rowIndex": self.row_index,
            "field": self.field,
            "severity": self.severity.value,
            "code": self.code,
            "message": self.message,
        }


@dataclass(frozen=True)
class Patch:
    """Classified before/after change on a single row."""
    row_index: int
    field: str
    kind: PatchKind
    before: str
    after: str
    description: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "rowIndex": self.row_index,
            "field": self.field,
            "kind": self.kind.value,
            "before": self.before,
            "after": self.after,
            "description": self.description,
        }


@dataclass(frozen=True)
class ParseRow:
    """Result of processing one input row."""
    row_index: int
    cells: tuple[str, ...]
    url: Optional[ParsedUrl]
    issues: tuple[LintIssue, ...] = ()
    patches: tuple[Patch, ...] = ()

    @property
    def has_errors(self) -> bool:
        """Check if any Error-severity issue was raised."""
        return any(issue.severity == Severity.ERROR for issue in self.issues)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "rowIndex": self.row_index,
            "cells": list(self.cells),
            "issues": [i.to_dict() for i in self.issues],
            "patches": [p.to_dict() for p in self.patches],
        }
        if self.url is not None:
            data["url"] = self.url.to_dict()
        return data


# ============================================================================
# Draft Model
# ============================================================================

@dataclass(frozen=True)
class DraftPayload:
    """Unsaved input and config kept across an external redirect."""
    input_raw: str
    input_mode: InputMode
    ruleset_config: RulesetConfig
    timestamp: int                          # Milliseconds since epoch

    def to_dict(self) -> dict[str, Any]:
        return {
            "inputRaw": self.input_raw,
            "inputMode": InputMode(self.input_mode).value,
            "rulesetConfig": self.ruleset_config.to_dict(),
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DraftPayload":
        return cls(
            input_raw=data["inputRaw"],
            input_mode=InputMode(data["inputMode"]),
            ruleset_config=RulesetConfig.from_dict(data.get("rulesetConfig") or {}),
            timestamp=int(data["timestamp"]),
        )
