"""Pipeline orchestrator for the Trello digest.

Connects ItemCollector and DigestReporter into a single run with
per-step error isolation and structured results.
"""

from .models import PipelineResult, StepResult
from .pipeline import DigestOrchestrator

__all__ = [
    "DigestOrchestrator",
    "PipelineResult",
    "StepResult",
]
