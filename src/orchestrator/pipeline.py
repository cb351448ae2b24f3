"""DigestOrchestrator - connects collection and delivery into a single run."""

import logging
import time
from datetime import datetime, timezone
from typing import Callable, Optional

from src.config import DigestConfig
from src.digest import DigestReporter
from src.trello import AssignedItem, ItemCollector, TrelloClient, group_by_assignee

from .models import PipelineResult, StepResult

logger = logging.getLogger(__name__)


class DigestOrchestrator:
    """Orchestrates the Trello-to-email digest run.

    Connects ItemCollector and DigestReporter into a single run with
    per-step error isolation and structured results.

    Example:
        result = DigestOrchestrator(config=DigestConfig.from_env()).run()
        print(f"Success: {result.success}")
    """

    def __init__(
        self,
        config: Optional[DigestConfig] = None,
        collector: Optional[ItemCollector] = None,
        reporter: Optional[DigestReporter] = None,
    ):
        """Initialize the orchestrator.

        Args:
            config: Run configuration. Required unless both collaborators
                are provided.
            collector: ItemCollector to use. Built from config if not provided.
            reporter: DigestReporter to use. Built from config if not provided.
        """
        self._config = config
        self._collector = collector
        self._reporter = reporter
        self._owned_client: Optional[TrelloClient] = None

    def _require_config(self) -> DigestConfig:
        if self._config is None:
            raise ValueError("DigestOrchestrator needs a DigestConfig to build its collaborators")
        return self._config

    def _get_collector(self) -> ItemCollector:
        if self._collector is None:
            config = self._require_config()
            self._owned_client = TrelloClient(api_key=config.trello_key, token=config.trello_token)
            self._collector = ItemCollector(
                self._owned_client,
                config.board_ids,
                skip_completed=config.skip_completed,
            )
        return self._collector

    def _get_reporter(self) -> DigestReporter:
        if self._reporter is None:
            config = self._require_config()
            self._reporter = DigestReporter(sender=config.sender, timezone=config.timezone)
        return self._reporter

    def _recipients(self) -> dict[str, str]:
        return dict(self._config.recipients) if self._config else {}

    @staticmethod
    def _skip_step(name: str) -> StepResult:
        """Record a step as skipped due to a prior failure."""
        return StepResult(
            name=name,
            success=False,
            duration_seconds=0.0,
            details={},
            skipped=True,
        )

    def _run_step(self, name: str, fn: Callable[[], dict]) -> StepResult:
        """Run a pipeline step with timing and error isolation."""
        start = time.monotonic()
        try:
            details = fn()
            duration = time.monotonic() - start
            return StepResult(
                name=name,
                success=True,
                duration_seconds=round(duration, 2),
                details=details,
            )
        except Exception as e:
            duration = time.monotonic() - start
            logger.exception("Step '%s' failed", name, extra={"step": name})
            return StepResult(
                name=name,
                success=False,
                duration_seconds=round(duration, 2),
                details={},
                error=str(e),
            )

    def close(self) -> None:
        """Release the Trello HTTP connection if this orchestrator created it."""
        if self._owned_client is not None:
            self._owned_client.close()

    def run(self, now: Optional[datetime] = None, dry_run: bool = False) -> PipelineResult:
        """Execute the full digest run.

        Steps:
            1. Collect due items from every board
            2. Build and deliver one digest per assignee

        Args:
            now: Reference instant for bucketing. Defaults to the
                reporter's current time.
            dry_run: Format digests but send nothing.

        Returns:
            PipelineResult with per-step metrics and one DeliveryResult
            per assignee.
        """
        result = PipelineResult(started_at=datetime.now(timezone.utc))
        try:
            self._run_steps(result, now, dry_run)
        finally:
            self.close()
        result.finished_at = datetime.now(timezone.utc)
        return result

    def _run_steps(self, result: PipelineResult, now: Optional[datetime], dry_run: bool) -> None:
        collected: list[AssignedItem] = []

        # Step 1: Collect
        def collect_step() -> dict:
            nonlocal collected
            collector = self._get_collector()
            collected = collector.collect()
            logger.info("Collected %d assigned due items", len(collected), extra={"step": "collect"})
            details = {"items_collected": len(collected)}
            if collector.errors:
                details["errors"] = list(collector.errors)
            return details

        collect_result = self._run_step("collect", collect_step)
        result.steps.append(collect_result)

        # Step 2: Deliver (depends on collect)
        if not collect_result.success:
            result.steps.append(self._skip_step("deliver"))
            return

        def deliver_step() -> dict:
            reporter = self._get_reporter()
            result.deliveries = reporter.generate_and_send(
                group_by_assignee(collected),
                self._recipients(),
                now=now,
                dry_run=dry_run,
            )

            skipped = sum(1 for d in result.deliveries if d.skipped)
            failed = sum(1 for d in result.deliveries if d.has_errors)
            logger.info(
                "Delivered %d digests (%d skipped, %d failed) for %d assignees",
                result.emails_sent,
                skipped,
                failed,
                len(result.deliveries),
                extra={"step": "deliver"},
            )
            details = {
                "assignees": len(result.deliveries),
                "emails_sent": result.emails_sent,
                "skipped": skipped,
                "failed": failed,
            }
            if result.delivery_errors:
                details["errors"] = result.delivery_errors
            return details

        result.steps.append(self._run_step("deliver", deliver_step))
