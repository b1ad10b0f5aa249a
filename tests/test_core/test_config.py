"""Unit tests for ruleset loading and validation.

Tests cover YAML and JSON files, the optional ``ruleset`` wrapper key,
validation errors, and dump/load round trips.
"""

import tempfile
import unittest
from pathlib import Path

from utmtidy.core.config import dump_ruleset_config, load_ruleset_config, validate_ruleset_config
from utmtidy.core.constants import CaseRule, MissingSeverity, StrictMode
from utmtidy.core.exceptions import ConfigError, InvalidRulesetError
from utmtidy.core.models import RulesetConfig


class TestValidateRulesetConfig(unittest.TestCase):
    """Test suite for validate_ruleset_config."""

    def test_empty_mapping_gives_defaults(self):
        """Test that an empty mapping validates to the default ruleset."""
        result = validate_ruleset_config({})
        self.assertTrue(result.ok)
        self.assertEqual(result.config, RulesetConfig())

    def test_none_gives_defaults(self):
        """Test that None is treated as an empty mapping."""
        self.assertEqual(validate_ruleset_config(None).config, RulesetConfig())

    def test_camel_case_keys(self):
        """Test camelCase wire names."""
        result = validate_ruleset_config({
            "name": "Paid",
            "allowedSources": ["google", "facebook"],
            "caseRule": "upper",
            "strictMode": "block",
            "missingRequiredSeverity": "warn",
            "hostDomain": "example.com",
        })
        self.assertTrue(result.ok)
        config = result.config
        self.assertEqual(config.name, "Paid")
        self.assertEqual(config.allowed_sources, ("google", "facebook"))
        self.assertEqual(config.case_rule, CaseRule.UPPER)
        self.assertEqual(config.strict_mode, StrictMode.BLOCK)
        self.assertEqual(config.missing_required_severity, MissingSeverity.WARN)
        self.assertEqual(config.host_domain, "example.com")

    def test_snake_case_keys(self):
        """Test snake_case aliases."""
        result = validate_ruleset_config({"strip_fragment": True, "required_params": ["utm_source"]})
        self.assertTrue(result.ok)
        self.assertTrue(result.config.strip_fragment)
        self.assertEqual(result.config.required_params, ("utm_source",))

    def test_not_a_mapping(self):
        """Test that non-mapping data is rejected."""
        result = validate_ruleset_config(["a"])
        self.assertFalse(result.ok)
        self.assertIsNone(result.config)

    def test_collects_all_errors(self):
        """Test that every invalid field is reported."""
        result = validate_ruleset_config({
            "allowedSources": "google",
            "trimWhitespace": "yes",
            "caseRule": "title",
            "name": 5,
        })
        self.assertFalse(result.ok)
        self.assertEqual(len(result.errors), 4)
        self.assertTrue(any("caseRule" in e for e in result.errors))

    def test_list_of_non_strings(self):
        """Test that list items must be strings."""
        result = validate_ruleset_config({"requiredParams": ["utm_source", 3]})
        self.assertFalse(result.ok)


class TestLoadRulesetConfig(unittest.TestCase):
    """Test suite for load_ruleset_config."""

    def setUp(self):
        """Set up test fixtures."""
        self.tmpdir = tempfile.TemporaryDirectory()
        self.dir = Path(self.tmpdir.name)

    def tearDown(self):
        """Clean up temporary files."""
        self.tmpdir.cleanup()

    def _write(self, name, text):
        path = self.dir / name
        path.write_text(text, encoding="utf-8")
        return path

    def test_none_returns_default(self):
        """Test that no path means the default ruleset."""
        self.assertEqual(load_ruleset_config(None), RulesetConfig())

    def test_yaml_file(self):
        """Test loading a YAML ruleset."""
        path = self._write("rules.yaml", (
            "name: Newsletter\n"
            "allowedMediums:\n"
            "  - email\n"
            "  - newsletter\n"
            "strictMode: warn\n"
        ))
        config = load_ruleset_config(path)
        self.assertEqual(config.name, "Newsletter")
        self.assertEqual(config.allowed_mediums, ("email", "newsletter"))
        self.assertEqual(config.strict_mode, StrictMode.WARN)

    def test_yaml_ruleset_wrapper(self):
        """Test that a top-level 'ruleset' key is unwrapped."""
        path = self._write("rules.yml", "ruleset:\n  caseRule: none\n")
        self.assertEqual(load_ruleset_config(path).case_rule, CaseRule.NONE)

    def test_empty_yaml_file(self):
        """Test that an empty file yields defaults."""
        path = self._write("empty.yaml", "")
        self.assertEqual(load_ruleset_config(path), RulesetConfig())

    def test_json_file(self):
        """Test loading a JSON ruleset."""
        path = self._write("rules.json", '{"hostDomain": "example.com", "stripFragment": true}')
        config = load_ruleset_config(str(path))
        self.assertEqual(config.host_domain, "example.com")
        self.assertTrue(config.strip_fragment)

    def test_missing_file(self):
        """Test that a missing file raises ConfigError."""
        with self.assertRaises(ConfigError):
            load_ruleset_config(self.dir / "nope.yaml")

    def test_bad_yaml(self):
        """Test that unparsable YAML raises ConfigError."""
        path = self._write("bad.yaml", "name: [unclosed\n")
        with self.assertRaises(ConfigError):
            load_ruleset_config(path)

    def test_bad_json(self):
        """Test that unparsable JSON raises ConfigError."""
        path = self._write("bad.json", "{not json")
        with self.assertRaises(ConfigError):
            load_ruleset_config(path)

    def test_invalid_values(self):
        """Test that invalid data raises InvalidRulesetError with details."""
        path = self._write("invalid.yaml", "strictMode: maybe\n")
        with self.assertRaises(InvalidRulesetError) as ctx:
            load_ruleset_config(path)
        self.assertEqual(len(ctx.exception.errors), 1)
        self.assertIn("strictMode", str(ctx.exception))

    def test_dump_round_trip(self):
        """Test that a dumped ruleset loads back equal."""
        config = RulesetConfig(
            id="r1",
            name="Custom",
            allowed_sources=("google",),
            case_rule="upper",
            strict_mode="block",
            host_domain="example.com",
        )
        path = self._write("dump.json", dump_ruleset_config(config))
        self.assertEqual(load_ruleset_config(path), config)


if __name__ == "__main__":
    unittest.main()
