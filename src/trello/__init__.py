"""Trello integration module.

This module reads cards and checklist items from Trello boards and turns
the ones that are due and assigned into digest items.
"""

from .collector import ItemCollector, group_by_assignee
from .exceptions import (
    BoardNotFoundError,
    RateLimitError,
    TrelloAPIError,
    TrelloAuthError,
    TrelloError,
    TrelloNotFoundError,
)
from .models import AssignedItem, Card, CheckItem, Checklist
from .trello_client import TrelloClient

__all__ = [
    # Main classes
    "TrelloClient",
    "ItemCollector",
    "group_by_assignee",
    # Models
    "Card",
    "Checklist",
    "CheckItem",
    "AssignedItem",
    # Exceptions
    "TrelloError",
    "TrelloAuthError",
    "TrelloAPIError",
    "TrelloNotFoundError",
    "BoardNotFoundError",
    "RateLimitError",
]
