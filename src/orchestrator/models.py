"""Data models for digest run results."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from src.digest.models import DeliveryResult


@dataclass
class StepResult:
    """Outcome of one run step ("collect" or "deliver")."""

    name: str
    success: bool
    duration_seconds: float
    details: dict[str, Any]
    error: str | None = None
    skipped: bool = False

    @property
    def status(self) -> str:
        if self.skipped:
            return "SKIPPED"
        return "OK" if self.success else "FAILED"


@dataclass
class PipelineResult:
    """Aggregate result of a digest run.

    Attributes:
        started_at: When the run began.
        finished_at: When the run ended, None while running.
        steps: Step outcomes in execution order.
        deliveries: One DeliveryResult per assignee that had items.
    """

    started_at: datetime
    finished_at: datetime | None = None
    steps: list[StepResult] = field(default_factory=list)
    deliveries: list[DeliveryResult] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """True when no step failed or was skipped."""
        return all(step.success for step in self.steps)

    @property
    def emails_sent(self) -> int:
        return sum(1 for d in self.deliveries if d.email_sent)

    @property
    def delivery_errors(self) -> list[str]:
        """Every per-assignee error, prefixed with the assignee."""
        return [f"{d.assignee}: {error}" for d in self.deliveries for error in d.errors]

    @property
    def fully_delivered(self) -> bool:
        """True when every step succeeded and no assignee recorded an error."""
        return self.success and not self.delivery_errors
