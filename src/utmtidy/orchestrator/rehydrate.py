"""Re-run the pipeline from a persisted draft."""

import logging
from typing import Optional

from utmtidy.core.constants import InputMode
from utmtidy.core.models import DraftPayload
from utmtidy.orchestrator.pipeline import PipelineResult, run_pipeline
from utmtidy.storage.drafts import DraftStore

logger = logging.getLogger(__name__)


def rehydrate_from_draft(payload: DraftPayload, *, max_rows: Optional[int] = None) -> PipelineResult:
    """Regenerate pipeline output from a draft payload.

    The stored input mode is informational: the mode is detected again
    from the input so that a draft always reproduces a fresh run.

    Args:
        payload: Draft holding the raw input and ruleset
        max_rows: Optional cap on processed URLs

    Returns:
        PipelineResult identical to running the pipeline on the same input
    """
    result = run_pipeline(payload.input_raw, payload.ruleset_config, max_rows=max_rows)
    if result.mode != payload.input_mode:
        logger.debug(f"Draft recorded mode {InputMode(payload.input_mode).value}, detected {result.mode.value}")
    return result


class RehydrationService:
    """Resume processing of drafts saved before an external redirect."""

    def __init__(self, store: DraftStore):
        self.store = store

    def resume(self, draft_id: str, *, consume: bool = True, max_rows: Optional[int] = None) -> PipelineResult:
        """Load a draft and re-run its pipeline.

        Args:
            draft_id: Id returned by DraftStore.save
            consume: Remove the draft after loading it
            max_rows: Optional cap on processed URLs

        Returns:
            PipelineResult for the draft's input

        Raises:
            DraftNotFoundError: If the draft is unknown or expired
        """
        payload = self.store.require(draft_id)
        if consume:
            self.store.clear(draft_id)
        logger.info(f"Rehydrating draft {draft_id}")
        return rehydrate_from_draft(payload, max_rows=max_rows)
