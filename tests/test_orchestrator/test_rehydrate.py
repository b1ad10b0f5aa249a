"""Unit tests for draft rehydration."""

import unittest

from utmtidy.core.constants import InputMode
from utmtidy.core.exceptions import DraftNotFoundError
from utmtidy.core.models import DraftPayload, RulesetConfig
from utmtidy.orchestrator.pipeline import run_pipeline
from utmtidy.orchestrator.rehydrate import RehydrationService, rehydrate_from_draft
from utmtidy.storage.drafts import DraftStore


INPUT = "https://example.com/?utm_source=Google&utm_medium=cpc\nnot-a-url"


def make_payload(input_raw=INPUT, mode=InputMode.URL_LIST, ruleset=None):
    return DraftPayload(
        input_raw=input_raw,
        input_mode=mode,
        ruleset_config=ruleset or RulesetConfig(case_rule="upper"),
        timestamp=1700000000000,
    )


class TestRehydrateFromDraft(unittest.TestCase):
    """Test suite for rehydrate_from_draft."""

    def test_matches_fresh_run(self):
        """Test that rehydration equals running the pipeline directly."""
        payload = make_payload()
        rehydrated = rehydrate_from_draft(payload)
        fresh = run_pipeline(payload.input_raw, payload.ruleset_config)

        self.assertEqual(rehydrated.rows, fresh.rows)
        self.assertEqual(rehydrated.all_issues, fresh.all_issues)
        self.assertEqual(rehydrated.all_patches, fresh.all_patches)
        self.assertEqual(rehydrated.cleaned_urls[0].values_for("utm_source"), ["GOOGLE"])

    def test_mode_detected_again(self):
        """Test that the mode comes from the input, not the payload."""
        payload = make_payload(mode=InputMode.TSV_RANGE)
        self.assertEqual(rehydrate_from_draft(payload).mode, InputMode.URL_LIST)

    def test_max_rows(self):
        """Test that a row cap can be applied on rehydration."""
        result = rehydrate_from_draft(make_payload(), max_rows=1)
        self.assertEqual(len(result.rows), 1)
        self.assertTrue(result.truncated)


class TestRehydrationService(unittest.TestCase):
    """Test suite for RehydrationService."""

    def setUp(self):
        """Set up test fixtures."""
        self.store = DraftStore()
        self.service = RehydrationService(self.store)

    def test_resume_consumes_draft(self):
        """Test that resuming removes the draft by default."""
        draft_id = self.store.save(make_payload())
        result = self.service.resume(draft_id)

        self.assertEqual(len(result.rows), 2)
        self.assertIsNone(self.store.load(draft_id))

    def test_resume_keep_draft(self):
        """Test that consume=False leaves the draft in place."""
        draft_id = self.store.save(make_payload())
        self.service.resume(draft_id, consume=False)
        self.assertIsNotNone(self.store.load(draft_id))

    def test_resume_unknown(self):
        """Test that an unknown id raises DraftNotFoundError."""
        with self.assertRaises(DraftNotFoundError):
            self.service.resume("missing")


if __name__ == "__main__":
    unittest.main()
