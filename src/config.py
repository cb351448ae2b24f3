"""Run-time configuration for the digest job, read from the environment."""

import os
from dataclasses import dataclass, field
from datetime import tzinfo
from typing import Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

_TRUE_VALUES = {"1", "true", "yes", "on"}


class ConfigError(Exception):
    """Raised when required configuration is missing or malformed."""

    pass


def _split_list(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def _parse_recipients(value: str) -> dict[str, str]:
    """Parse ``memberId=email,memberId=email`` into a mapping."""
    recipients = {}
    for entry in _split_list(value):
        member_id, sep, email = entry.partition("=")
        if not sep or not member_id.strip() or not email.strip():
            raise ConfigError(f"Malformed TRELLO_RECIPIENTS entry '{entry}', expected memberId=email")
        recipients[member_id.strip()] = email.strip()
    return recipients


def _load_timezone(name: str) -> Optional[tzinfo]:
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except ZoneInfoNotFoundError as e:
        raise ConfigError(f"Unknown DIGEST_TIMEZONE '{name}'") from e


@dataclass
class DigestConfig:
    """Settings consumed once at startup.

    Attributes:
        trello_key: Trello API key.
        trello_token: Trello API token.
        board_ids: Boards to scan.
        recipients: Email address keyed by Trello member ID.
        timezone_name: IANA zone the digest's days are taken in; empty
            means the machine's local zone.
        skip_completed: Leave out completed cards and checklist items.
        sender: Optional From header for digest emails.
    """

    trello_key: str
    trello_token: str
    board_ids: list[str] = field(default_factory=list)
    recipients: dict[str, str] = field(default_factory=dict)
    timezone_name: str = ""
    skip_completed: bool = False
    sender: Optional[str] = None

    @property
    def timezone(self) -> Optional[tzinfo]:
        return _load_timezone(self.timezone_name)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DigestConfig":
        """Build the configuration from environment variables.

        Environment variables:
            TRELLO_KEY, TRELLO_TOKEN: API credentials (required).
            TRELLO_BOARD_IDS: Comma-separated board IDs. TRELLO_BOARD_ID
                is accepted for a single board.
            TRELLO_RECIPIENTS: Comma-separated memberId=email pairs.
                TRELLO_MEMBER_ID with USER_EMAIL adds a single pair.
            DIGEST_TIMEZONE: Optional IANA zone name.
            DIGEST_SKIP_COMPLETED: "1"/"true" to leave out completed items.
            DIGEST_SENDER: Optional From header.

        Raises:
            ConfigError: If a required value is missing or malformed.
        """
        env = os.environ if environ is None else environ

        key = env.get("TRELLO_KEY", "").strip()
        token = env.get("TRELLO_TOKEN", "").strip()
        if not key or not token:
            raise ConfigError("TRELLO_KEY and TRELLO_TOKEN must be set")

        board_ids = _split_list(env.get("TRELLO_BOARD_IDS", ""))
        single_board = env.get("TRELLO_BOARD_ID", "").strip()
        if single_board and single_board not in board_ids:
            board_ids.append(single_board)

        recipients = _parse_recipients(env.get("TRELLO_RECIPIENTS", ""))
        member_id = env.get("TRELLO_MEMBER_ID", "").strip()
        user_email = env.get("USER_EMAIL", "").strip()
        if member_id and user_email:
            recipients.setdefault(member_id, user_email)

        timezone_name = env.get("DIGEST_TIMEZONE", "").strip()
        _load_timezone(timezone_name)

        return cls(
            trello_key=key,
            trello_token=token,
            board_ids=board_ids,
            recipients=recipients,
            timezone_name=timezone_name,
            skip_completed=env.get("DIGEST_SKIP_COMPLETED", "").strip().lower() in _TRUE_VALUES,
            sender=env.get("DIGEST_SENDER", "").strip() or None,
        )
