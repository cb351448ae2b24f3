"""CLI entry point for the Trello due-item digest."""

import argparse
import sys

from dotenv import load_dotenv

from src.config import ConfigError, DigestConfig
from src.logging_config import configure_logging
from src.orchestrator import DigestOrchestrator


def main() -> int:
    load_dotenv()

    parser = argparse.ArgumentParser(description="Email each assignee a digest of their due Trello items")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set logging level (overrides LOG_LEVEL env var)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the digests instead of sending them",
    )
    parser.add_argument(
        "--board",
        action="append",
        metavar="BOARD_ID",
        help="Board to scan (repeatable, overrides TRELLO_BOARD_IDS)",
    )
    args = parser.parse_args()
    configure_logging(level_override=args.log_level)

    try:
        config = DigestConfig.from_env()
    except ConfigError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    if args.board:
        config.board_ids = args.board
    if not config.board_ids:
        print("ERROR: no boards configured (set TRELLO_BOARD_IDS or pass --board)", file=sys.stderr)
        return 2

    result = DigestOrchestrator(config=config).run(dry_run=args.dry_run)

    if args.dry_run:
        for delivery in result.deliveries:
            recipient = delivery.email_recipient or "(no email)"
            print(f"\n=== {delivery.assignee} -> {recipient} ===")
            print(delivery.plain_text_output or "(no due items)")

    # Print summary
    print("\n--- Digest Summary ---")
    for step in result.steps:
        print(f"  {step.name}: {step.status} ({step.duration_seconds}s)")
        for key, value in step.details.items():
            print(f"    {key}: {value}")
        if step.error:
            print(f"    error: {step.error}")

    success = result.fully_delivered
    print(f"\nResult: {'SUCCESS' if success else 'FAILURE'}")

    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
