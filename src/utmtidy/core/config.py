"""Ruleset configuration loader for utmtidy.

This module provides functions to load and validate ruleset files in
YAML or JSON form. The pipeline assumes an already valid RulesetConfig;
validation happens here, at the loading seam.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from utmtidy.core.constants import CaseRule, MissingSeverity, StrictMode
from utmtidy.core.exceptions import ConfigError, InvalidRulesetError
from utmtidy.core.models import RulesetConfig

logger = logging.getLogger(__name__)


# ============================================================================
# Validation
# ============================================================================

@dataclass
class ValidationResult:
    """Outcome of validating raw ruleset data."""
    ok: bool
    config: Optional[RulesetConfig] = None
    errors: list[str] = field(default_factory=list)


_LIST_FIELDS = ("requiredParams", "allowedSources", "allowedMediums", "allowedCampaigns")
_BOOL_FIELDS = ("trimWhitespace", "stripFragment")
_ENUM_FIELDS = {
    "caseRule": CaseRule,
    "strictMode": StrictMode,
    "missingRequiredSeverity": MissingSeverity,
}
_SNAKE_ALIASES = {
    "required_params": "requiredParams",
    "allowed_sources": "allowedSources",
    "allowed_mediums": "allowedMediums",
    "allowed_campaigns": "allowedCampaigns",
    "trim_whitespace": "trimWhitespace",
    "strip_fragment": "stripFragment",
    "case_rule": "caseRule",
    "strict_mode": "strictMode",
    "missing_required_severity": "missingRequiredSeverity",
    "host_domain": "hostDomain",
}


def _to_wire_keys(data: dict[str, Any]) -> dict[str, Any]:
    return {_SNAKE_ALIASES.get(key, key): value for key, value in data.items()}


def validate_ruleset_config(data: Any) -> ValidationResult:
    """Validate raw ruleset data without raising.

    Args:
        data: Mapping with camelCase or snake_case ruleset keys

    Returns:
        ValidationResult with the built config on success, or the list
        of problems found on failure
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        return ValidationResult(ok=False, errors=["Ruleset must be a mapping"])

    wire = _to_wire_keys(data)
    errors: list[str] = []

    for name in _LIST_FIELDS:
        value = wire.get(name)
        if value is None:
            continue
        if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
            errors.append(f"'{name}' must be a list of strings")

    for name in _BOOL_FIELDS:
        value = wire.get(name)
        if value is not None and not isinstance(value, bool):
            errors.append(f"'{name}' must be a boolean")

    for name, enum_cls in _ENUM_FIELDS.items():
        value = wire.get(name)
        if value is None:
            continue
        allowed = [member.value for member in enum_cls]
        if value not in allowed:
            errors.append(f"'{name}' must be one of: {', '.join(allowed)}")

    for name in ("id", "name", "hostDomain"):
        value = wire.get(name)
        if value is not None and not isinstance(value, str):
            errors.append(f"'{name}' must be a string")

    if errors:
        return ValidationResult(ok=False, errors=errors)

    return ValidationResult(ok=True, config=RulesetConfig.from_dict(wire))


# ============================================================================
# Ruleset File Loader
# ============================================================================

def load_ruleset_config(ruleset_file: Path | str | None = None) -> RulesetConfig:
    """Load a ruleset from a YAML or JSON file.

    Args:
        ruleset_file: Path to ruleset file. If None, returns the default ruleset

    Returns:
        RulesetConfig built from the file

    Raises:
        ConfigError: If file not found or parsing fails
        InvalidRulesetError: If the ruleset data is invalid
    """
    if ruleset_file is None:
        return RulesetConfig()

    ruleset_path = Path(ruleset_file)
    if not ruleset_path.exists():
        raise ConfigError(f"Ruleset file not found: {ruleset_path}")

    try:
        text = ruleset_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to read ruleset file: {e}") from e

    if ruleset_path.suffix.lower() == ".json":
        try:
            data = json.loads(text) if text.strip() else {}
        except json.JSONDecodeError as e:
            raise ConfigError(f"Failed to parse ruleset JSON: {e}") from e
    else:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse ruleset YAML: {e}") from e

    if isinstance(data, dict) and isinstance(data.get("ruleset"), dict):
        data = data["ruleset"]

    result = validate_ruleset_config(data)
    if not result.ok:
        raise InvalidRulesetError(result.errors)

    logger.debug(f"Loaded ruleset '{result.config.name}' from {ruleset_path}")
    return result.config


def dump_ruleset_config(config: RulesetConfig) -> str:
    """Serialize a ruleset to JSON text that loads back unchanged."""
    return json.dumps(config.to_dict(), indent=2)
