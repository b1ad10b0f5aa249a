"""Unit tests for URL parsing.

Tests for parse_url_row including UTM extraction, duplicate detection,
separation of other params, fragments, mixed-case keys and parse errors.
"""

import unittest

from utmtidy.core.models import UtmParam
from utmtidy.ingest.parser import EMPTY_URL_ERROR, MALFORMED_URL_ERROR, parse_url_row


class TestParseUrlRow(unittest.TestCase):
    """Test suite for parse_url_row."""

    def test_extracts_utm_params(self):
        """Test structural fields and UTM params of a valid URL."""
        result = parse_url_row(
            "https://example.com/page?utm_source=google&utm_medium=cpc&utm_campaign=spring_sale"
        )
        self.assertIsNone(result.parse_error)
        self.assertEqual(result.protocol, "https")
        self.assertEqual(result.host, "example.com")
        self.assertEqual(result.pathname, "/page")
        self.assertEqual(len(result.utm_params), 3)
        self.assertEqual(result.utm_params[0], UtmParam("utm_source", "google", "utm_source"))
        self.assertEqual(result.utm_params[1], UtmParam("utm_medium", "cpc", "utm_medium"))
        self.assertEqual(result.duplicate_keys, [])

    def test_duplicates_retained(self):
        """Test that duplicate UTM keys are flagged and all kept in order."""
        result = parse_url_row(
            "https://example.com?utm_source=google&utm_source=facebook&utm_medium=cpc"
        )
        self.assertEqual(len(result.utm_params), 3)
        self.assertEqual(result.values_for("utm_source"), ["google", "facebook"])
        self.assertIn("utm_source", result.duplicate_keys)

    def test_duplicates_counted_case_insensitively(self):
        """Test that UTM_SOURCE and utm_source count as the same key."""
        result = parse_url_row("https://example.com?UTM_SOURCE=a&utm_source=b")
        self.assertEqual(result.duplicate_keys, ["utm_source"])

    def test_non_utm_repeats_not_flagged(self):
        """Test that repeated non-UTM params are not UTM duplicates."""
        result = parse_url_row("https://example.com?ref=a&ref=b&utm_source=x")
        self.assertEqual(result.duplicate_keys, [])
        self.assertEqual(result.other_params, {"ref": "b"})

    def test_malformed_url(self):
        """Test that text without a scheme fails to parse."""
        result = parse_url_row("not-a-url")
        self.assertEqual(result.parse_error, MALFORMED_URL_ERROR)
        self.assertEqual(result.protocol, "")
        self.assertEqual(result.host, "")
        self.assertEqual(result.utm_params, [])
        self.assertEqual(result.raw, "not-a-url")

    def test_http_without_host_is_malformed(self):
        """Test that an http URL must carry a host."""
        self.assertIsNotNone(parse_url_row("https://").parse_error)

    def test_invalid_port_is_malformed(self):
        """Test that a non-numeric port fails to parse."""
        self.assertEqual(parse_url_row("https://example.com:abc/").parse_error, MALFORMED_URL_ERROR)

    def test_empty_string(self):
        """Test that blank input reports an empty URL."""
        self.assertEqual(parse_url_row("").parse_error, EMPTY_URL_ERROR)
        self.assertEqual(parse_url_row("   ").parse_error, EMPTY_URL_ERROR)

    def test_separates_other_params(self):
        """Test that non-UTM params land in other_params."""
        result = parse_url_row("https://example.com?utm_source=test&ref=homepage&fbclid=abc123")
        self.assertEqual(len(result.utm_params), 1)
        self.assertEqual(result.other_params["ref"], "homepage")
        self.assertEqual(result.other_params["fbclid"], "abc123")

    def test_extracts_fragment(self):
        """Test that the fragment is stored without '#'."""
        result = parse_url_row("https://example.com?utm_source=google#section-2")
        self.assertEqual(result.fragment, "section-2")

    def test_mixed_case_keys(self):
        """Test that keys are lowercased while raw key and value are kept."""
        result = parse_url_row("https://example.com?UTM_SOURCE=Google&utm_medium=CPC")
        self.assertEqual(result.utm_params[0].raw_key, "UTM_SOURCE")
        self.assertEqual(result.utm_params[0].key, "utm_source")
        self.assertEqual(result.utm_params[0].value, "Google")

    def test_trims_and_strips_port_and_credentials(self):
        """Test trimming and that host excludes port and user info."""
        result = parse_url_row("  https://user:pw@Example.com:8080/a?utm_source=x  ")
        self.assertEqual(result.raw, "https://user:pw@Example.com:8080/a?utm_source=x")
        self.assertEqual(result.host, "example.com")
        self.assertEqual(result.pathname, "/a")

    def test_empty_path_becomes_root(self):
        """Test that a bare host gets the root path."""
        self.assertEqual(parse_url_row("https://example.com?utm_source=x").pathname, "/")

    def test_query_values_decoded(self):
        """Test that percent-encoding and '+' are decoded."""
        result = parse_url_row("https://example.com?utm_campaign=spring%20sale&utm_term=a+b")
        self.assertEqual(result.values_for("utm_campaign"), ["spring sale"])
        self.assertEqual(result.values_for("utm_term"), ["a b"])

    def test_blank_value_kept(self):
        """Test that a key with an empty value is still recorded."""
        result = parse_url_row("https://example.com?utm_source=&utm_medium")
        self.assertEqual(result.values_for("utm_source"), [""])
        self.assertEqual(result.values_for("utm_medium"), [""])


if __name__ == "__main__":
    unittest.main()
