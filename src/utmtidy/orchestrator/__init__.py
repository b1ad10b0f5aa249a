"""Orchestrator module for pipeline execution.

This module provides the pipeline entry point that takes pasted text to
per-row results, and the rehydration service that replays a saved draft.
"""

from utmtidy.orchestrator.pipeline import (
    PipelineConfig,
    PipelineOrchestrator,
    PipelineResult,
    run_pipeline,
)
from utmtidy.orchestrator.rehydrate import (
    RehydrationService,
    rehydrate_from_draft,
)


__all__ = [
    # Pipeline
    "PipelineConfig",
    "PipelineOrchestrator",
    "PipelineResult",
    "run_pipeline",
    # Drafts
    "RehydrationService",
    "rehydrate_from_draft",
]
