"""Unit tests for allow-list suggestions."""

import unittest
from dataclasses import replace

from utmtidy.classifier.suggester import find_closest_match, suggest_semantic_fixes
from utmtidy.core.constants import PatchKind
from utmtidy.core.models import RulesetConfig
from utmtidy.ingest.parser import parse_url_row


class TestFindClosestMatch(unittest.TestCase):
    """Test suite for find_closest_match."""

    def test_typo_matched(self):
        """Test that a transposition finds the intended entry."""
        self.assertEqual(find_closest_match("googel", ["google", "facebook", "twitter"]), "google")

    def test_exact_match_needs_no_suggestion(self):
        """Test that an exact case-insensitive match returns None."""
        self.assertIsNone(find_closest_match("Google", ["google"]))

    def test_too_distant(self):
        """Test that distant values get no suggestion."""
        self.assertIsNone(find_closest_match("tiktok", ["google", "facebook"]))

    def test_first_best_wins(self):
        """Test that ties keep the earlier allow-list entry."""
        self.assertEqual(find_closest_match("cpa", ["cpc", "cpm"]), "cpc")

    def test_limit_scales_with_length(self):
        """Test that longer values tolerate more edits."""
        self.assertEqual(find_closest_match("newsleterr_mai", ["newsletter_mail"]), "newsletter_mail")

    def test_empty_allow_list(self):
        """Test that an empty allow-list yields None."""
        self.assertIsNone(find_closest_match("google", []))

    def test_unit_cost_edits(self):
        """Test that a transposition counts as two edits, not one."""
        self.assertEqual(find_closest_match("cpm", ["pcm", "cpx"]), "cpx")

    def test_long_value_clamped(self):
        """Test that very long values are compared on their clamped prefix."""
        value = "a" * 5000
        self.assertEqual(find_closest_match(value, ["a" * 256]), "a" * 256)

    def test_preserves_allow_list_spelling(self):
        """Test that the entry is returned as written in the allow-list."""
        self.assertEqual(find_closest_match("facebok", ["Facebook"]), "Facebook")


class TestSuggestSemanticFixes(unittest.TestCase):
    """Test suite for suggest_semantic_fixes."""

    def setUp(self):
        """Set up test fixtures."""
        self.ruleset = RulesetConfig(allowed_sources=("google", "facebook", "twitter"))

    def test_semantic_patch(self):
        """Test that a typo yields one SEMANTIC patch."""
        parsed = parse_url_row("https://example.com?utm_source=googel&utm_medium=cpc")
        patches = suggest_semantic_fixes(parsed, self.ruleset, row_index=3)

        self.assertEqual(len(patches), 1)
        patch = patches[0]
        self.assertEqual(patch.kind, PatchKind.SEMANTIC)
        self.assertEqual(patch.field, "utm_source")
        self.assertEqual(patch.before, "googel")
        self.assertEqual(patch.after, "google")
        self.assertEqual(patch.row_index, 3)

    def test_allowed_value_no_patch(self):
        """Test that an allowed value produces nothing."""
        parsed = parse_url_row("https://example.com?utm_source=Facebook")
        self.assertEqual(suggest_semantic_fixes(parsed, self.ruleset), [])

    def test_no_allow_list_no_patch(self):
        """Test that keys without an allow-list are skipped."""
        parsed = parse_url_row("https://example.com?utm_medium=emial")
        self.assertEqual(suggest_semantic_fixes(parsed, self.ruleset), [])

    def test_independent_of_strict_mode(self):
        """Test that suggestions appear whatever the strict mode."""
        parsed = parse_url_row("https://example.com?utm_source=twiter")
        for mode in ("off", "warn", "block"):
            ruleset = replace(self.ruleset, strict_mode=mode)
            patches = suggest_semantic_fixes(parsed, ruleset)
            self.assertEqual([p.after for p in patches], ["twitter"])

    def test_each_duplicate_checked(self):
        """Test that every occurrence of a key is considered."""
        parsed = parse_url_row("https://example.com?utm_source=googel&utm_source=facebok")
        patches = suggest_semantic_fixes(parsed, self.ruleset)
        self.assertEqual([p.after for p in patches], ["google", "facebook"])

    def test_parse_error_no_patch(self):
        """Test that unparseable URLs produce no suggestions."""
        self.assertEqual(suggest_semantic_fixes(parse_url_row("nope"), self.ruleset), [])


if __name__ == "__main__":
    unittest.main()
