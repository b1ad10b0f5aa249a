"""Unit tests for input mode detection."""

import unittest

from utmtidy.core.constants import InputMode
from utmtidy.ingest.detector import detect_input_mode


class TestDetectInputMode(unittest.TestCase):
    """Test suite for detect_input_mode."""

    def test_empty_input_defaults_to_url_list(self):
        """Test that blank text is treated as a URL list."""
        self.assertEqual(detect_input_mode(""), InputMode.URL_LIST)
        self.assertEqual(detect_input_mode("   \n\n  "), InputMode.URL_LIST)

    def test_plain_url_lines(self):
        """Test that one URL per line is a URL list."""
        text = "https://a.com?utm_source=x\nhttp://b.com\n"
        self.assertEqual(detect_input_mode(text), InputMode.URL_LIST)

    def test_majority_tab_lines_is_tsv(self):
        """Test that at least half the lines containing tabs means TSV."""
        text = "Campaign A\thttps://a.com\nCampaign B\thttps://b.com\nnotes"
        self.assertEqual(detect_input_mode(text), InputMode.TSV_RANGE)

    def test_url_majority_beats_minority_tabs(self):
        """Test that a URL majority wins over a few tabbed lines."""
        text = "https://a.com\nhttps://b.com\nhttps://c.com\nx\ty"
        self.assertEqual(detect_input_mode(text), InputMode.URL_LIST)

    def test_any_tab_fallback(self):
        """Test that a lone tab decides when neither ratio is met."""
        text = "alpha\nbeta\ngamma\ndelta\tepsilon"
        self.assertEqual(detect_input_mode(text), InputMode.TSV_RANGE)

    def test_no_urls_no_tabs_is_url_list(self):
        """Test that arbitrary text without tabs is a URL list."""
        self.assertEqual(detect_input_mode("hello\nworld"), InputMode.URL_LIST)

    def test_url_match_is_case_insensitive(self):
        """Test that HTTPS:// in upper case still counts as a URL."""
        self.assertEqual(detect_input_mode("  HTTPS://A.COM  \nfoo"), InputMode.URL_LIST)


if __name__ == "__main__":
    unittest.main()
