"""Data models for the Trello module."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from src.digest.models import DueItem


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a Trello ISO-8601 timestamp (e.g. 2024-06-10T10:00:00.000Z)."""
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@dataclass
class CheckItem:
    """A checklist item on a card.

    Attributes:
        id: Trello check item ID.
        name: Item text.
        due: Optional due timestamp.
        member_id: The single member the item is assigned to, if any.
        state: "incomplete" or "complete".
    """

    id: str
    name: str
    due: Optional[datetime] = None
    member_id: Optional[str] = None
    state: str = "incomplete"

    @property
    def is_complete(self) -> bool:
        return self.state == "complete"

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "CheckItem":
        """Create from Trello API response."""
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            due=parse_timestamp(data.get("due")),
            member_id=data.get("idMember"),
            state=data.get("state", "incomplete"),
        )


@dataclass
class Checklist:
    """A checklist on a card."""

    id: str
    name: str = ""
    items: list[CheckItem] = field(default_factory=list)

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "Checklist":
        """Create from Trello API response."""
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            items=[CheckItem.from_api_response(i) for i in data.get("checkItems") or []],
        )


@dataclass
class Card:
    """A Trello card.

    Attributes:
        id: Trello card ID.
        name: Card title.
        due: Optional due timestamp.
        member_ids: Members assigned to the card.
        due_complete: Whether the due date was marked done.
        checklist_ids: IDs of the card's checklists.
    """

    id: str
    name: str
    due: Optional[datetime] = None
    member_ids: list[str] = field(default_factory=list)
    due_complete: bool = False
    checklist_ids: list[str] = field(default_factory=list)

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "Card":
        """Create from Trello API response."""
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            due=parse_timestamp(data.get("due")),
            member_ids=list(data.get("idMembers") or []),
            due_complete=bool(data.get("dueComplete", False)),
            checklist_ids=list(data.get("idChecklists") or []),
        )


@dataclass(frozen=True)
class AssignedItem:
    """A due item together with the member it is assigned to."""

    member_id: str
    item: DueItem
