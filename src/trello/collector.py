"""ItemCollector: turns Trello boards into assigned due items."""

import logging
from typing import Iterable

from src.digest.models import DueItem

from .exceptions import TrelloError
from .models import AssignedItem, Card
from .trello_client import TrelloClient

logger = logging.getLogger(__name__)


class ItemCollector:
    """Collects due cards and checklist items across a set of boards.

    Only items with both a due timestamp and an assignee are kept. A card
    yields one item per member; a checklist item yields one item for its
    single member. Failures are isolated per board and per card.
    """

    def __init__(
        self,
        client: TrelloClient,
        board_ids: Iterable[str],
        skip_completed: bool = False,
    ):
        """Initialize the collector.

        Args:
            client: TrelloClient used for all API calls.
            board_ids: Boards to scan.
            skip_completed: Leave out cards whose due date is marked done
                and checklist items that are checked off.
        """
        self._client = client
        self._board_ids = list(board_ids)
        self._skip_completed = skip_completed
        self.errors: list[str] = []

    def _card_items(self, card: Card) -> list[AssignedItem]:
        if card.due is None or not card.member_ids:
            return []
        if self._skip_completed and card.due_complete:
            return []
        item = DueItem(text=card.name, due=card.due, is_top_level=True)
        return [AssignedItem(member_id=m, item=item) for m in card.member_ids]

    def _checklist_items(self, card: Card) -> list[AssignedItem]:
        if not card.checklist_ids:
            return []

        try:
            checklists = self._client.get_card_checklists(card.id)
        except TrelloError as e:
            logger.warning(
                "Skipping checklists of card %s (%s): %s", card.id, card.name, e, extra={"card_id": card.id}
            )
            self.errors.append(f"card {card.id}: {e}")
            return []

        collected = []
        for checklist in checklists:
            for check_item in checklist.items:
                if check_item.due is None or not check_item.member_id:
                    continue
                if self._skip_completed and check_item.is_complete:
                    continue
                item = DueItem(
                    text=check_item.name,
                    due=check_item.due,
                    is_top_level=False,
                    parent_name=card.name,
                )
                collected.append(AssignedItem(member_id=check_item.member_id, item=item))
        return collected

    def collect_board(self, board_id: str) -> list[AssignedItem]:
        """Collect due items from one board.

        Raises:
            TrelloError: If the board's cards cannot be fetched.
        """
        collected = []
        for card in self._client.get_board_cards(board_id):
            logger.debug(
                "Card %s (%s) members=%s due=%s",
                card.id,
                card.name,
                ",".join(card.member_ids),
                card.due.isoformat() if card.due else None,
                extra={"board_id": board_id, "card_id": card.id},
            )
            collected.extend(self._card_items(card))
            collected.extend(self._checklist_items(card))
        return collected

    def collect(self) -> list[AssignedItem]:
        """Collect due items from every configured board.

        A board that fails is logged, recorded in ``errors`` and skipped.

        Returns:
            All assigned due items, board by board.
        """
        self.errors = []
        collected: list[AssignedItem] = []
        for board_id in self._board_ids:
            try:
                board_items = self.collect_board(board_id)
            except TrelloError as e:
                logger.error("Skipping board %s: %s", board_id, e, extra={"board_id": board_id})
                self.errors.append(f"board {board_id}: {e}")
                continue
            logger.info(
                "Collected %d due items from board %s", len(board_items), board_id, extra={"board_id": board_id}
            )
            collected.extend(board_items)
        return collected


def group_by_assignee(items: Iterable[AssignedItem]) -> dict[str, list[DueItem]]:
    """Partition assigned items by member ID.

    Members appear in first-seen order and each list keeps input order;
    ordering by due time is left to the digest.
    """
    grouped: dict[str, list[DueItem]] = {}
    for assigned in items:
        grouped.setdefault(assigned.member_id, []).append(assigned.item)
    return grouped
