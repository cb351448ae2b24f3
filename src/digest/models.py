"""Data models for the digest module."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional

from .exceptions import InvalidItemError


class Bucket(Enum):
    """Time windows a due item can fall into, in display order."""

    OVERDUE = "overdue"
    TODAY = "today"
    THIS_WEEK = "this_week"
    FUTURE = "future"


@dataclass(frozen=True)
class DueItem:
    """A single card or checklist item with a deadline.

    Attributes:
        text: Human-readable description (card or checklist item name).
        due: When the item is due.
        is_top_level: True for cards, False for checklist items.
        parent_name: Name of the card a checklist item belongs to.
    """

    text: str
    due: datetime
    is_top_level: bool = True
    parent_name: Optional[str] = None

    def __post_init__(self):
        if self.due is None:
            raise InvalidItemError(self.text, "missing due timestamp")
        if not isinstance(self.due, datetime):
            raise InvalidItemError(self.text, f"due must be a datetime, got {type(self.due).__name__}")

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "text": self.text,
            "due": self.due.isoformat(),
            "is_top_level": self.is_top_level,
            "parent_name": self.parent_name,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DueItem":
        """Deserialize from dictionary."""
        return cls(
            text=data["text"],
            due=datetime.fromisoformat(data["due"]),
            is_top_level=data.get("is_top_level", True),
            parent_name=data.get("parent_name"),
        )


@dataclass
class DigestSection:
    """A section of the digest grouping items that share a bucket.

    The This Week section carries one nested section per due day in
    ``groups``; every other section lists its items directly.

    Attributes:
        heading: Section title as rendered (may contain **bold** markup).
        bucket: The bucket this section represents.
        items: Items listed directly under the heading, in due order.
        day: Calendar day for a This Week day-group.
        groups: Day-groups of the This Week section, ascending by day.
    """

    heading: str
    bucket: Bucket
    items: list[DueItem] = field(default_factory=list)
    day: Optional[date] = None
    groups: list["DigestSection"] = field(default_factory=list)

    @property
    def count(self) -> int:
        """Number of items in this section, including day-groups."""
        return len(self.items) + sum(g.count for g in self.groups)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "heading": self.heading,
            "bucket": self.bucket.value,
            "items": [i.to_dict() for i in self.items],
            "day": self.day.isoformat() if self.day else None,
            "groups": [g.to_dict() for g in self.groups],
        }


@dataclass
class DigestReport:
    """The digest of due items for one assignee.

    Attributes:
        generated_at: Reference instant the items were bucketed against.
        assignee: Trello member ID the report belongs to.
        sections: Non-empty sections in display order.
    """

    generated_at: datetime = field(default_factory=datetime.now)
    assignee: str = ""
    sections: list[DigestSection] = field(default_factory=list)

    @property
    def total_items(self) -> int:
        return sum(s.count for s in self.sections)

    @property
    def total_overdue(self) -> int:
        for section in self.sections:
            if section.bucket is Bucket.OVERDUE:
                return section.count
        return 0

    @property
    def is_empty(self) -> bool:
        """Check if the digest has no due items."""
        return self.total_items == 0

    def section(self, bucket: Bucket) -> Optional[DigestSection]:
        """Return the section for a bucket, or None if it was suppressed."""
        for section in self.sections:
            if section.bucket is bucket:
                return section
        return None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "generated_at": self.generated_at.isoformat(),
            "assignee": self.assignee,
            "sections": [s.to_dict() for s in self.sections],
            "total_items": self.total_items,
            "total_overdue": self.total_overdue,
        }


@dataclass
class DeliveryResult:
    """Result of delivering one assignee's digest.

    Attributes:
        assignee: Trello member ID the digest was built for.
        delivered_at: When delivery was attempted.
        plain_text_output: The formatted plain text body.
        html_output: The formatted HTML body.
        email_sent: Whether the email was sent successfully.
        email_recipient: Who the email was sent to (if resolved).
        email_message_id: Gmail message ID of sent digest (if applicable).
        skipped: True when nothing was sent on purpose (dry run, empty digest).
        errors: Any errors encountered during delivery.
    """

    assignee: str = ""
    delivered_at: datetime = field(default_factory=datetime.now)
    plain_text_output: str = ""
    html_output: str = ""
    email_sent: bool = False
    email_recipient: str = ""
    email_message_id: Optional[str] = None
    skipped: bool = False
    errors: list[str] = field(default_factory=list)

    def add_error(self, error: str) -> None:
        """Record an error that occurred during delivery."""
        self.errors.append(error)

    @property
    def has_errors(self) -> bool:
        """Check if any errors occurred."""
        return len(self.errors) > 0

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        return {
            "assignee": self.assignee,
            "delivered_at": self.delivered_at.isoformat(),
            "plain_text_output": self.plain_text_output,
            "html_output": self.html_output,
            "email_sent": self.email_sent,
            "email_recipient": self.email_recipient,
            "email_message_id": self.email_message_id,
            "skipped": self.skipped,
            "errors": self.errors,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DeliveryResult":
        """Deserialize from dictionary."""
        return cls(
            assignee=data.get("assignee", ""),
            delivered_at=datetime.fromisoformat(data["delivered_at"]),
            plain_text_output=data.get("plain_text_output", ""),
            html_output=data.get("html_output", ""),
            email_sent=data.get("email_sent", False),
            email_recipient=data.get("email_recipient", ""),
            email_message_id=data.get("email_message_id"),
            skipped=data.get("skipped", False),
            errors=data.get("errors", []),
        )
