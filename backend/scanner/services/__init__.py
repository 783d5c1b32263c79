"""Scanner services."""

from scanner.services.batch_orchestrator import BatchOrchestrator, ProgressCallback
from scanner.services.narrative import NarrativeClient, build_prompt
from scanner.services.timeframe_arbiter import TimeframeArbiter

__all__ = [
    "BatchOrchestrator",
    "ProgressCallback",
    "NarrativeClient",
    "build_prompt",
    "TimeframeArbiter",
]
