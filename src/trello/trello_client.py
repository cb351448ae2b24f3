"""TrelloClient for the Trello REST API."""

import logging
from typing import Any, Callable, Optional, TypeVar

import httpx

from .exceptions import (
    BoardNotFoundError,
    RateLimitError,
    TrelloAPIError,
    TrelloAuthError,
    TrelloNotFoundError,
)
from .models import Card, Checklist

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRELLO_BASE_URL = "https://api.trello.com/1"
DEFAULT_TIMEOUT = 15.0

CARD_FIELDS = "name,due,dueComplete,idMembers,idChecklists"
CHECK_ITEM_FIELDS = "name,due,idMember,state"


class TrelloClient:
    """Read-only access to the boards, cards and checklists a digest needs.

    Credentials travel in the Authorization header rather than the query
    string, so they never show up in logged URLs.
    """

    def __init__(
        self,
        api_key: str,
        token: str,
        base_url: str = TRELLO_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize the TrelloClient.

        Args:
            api_key: Trello API key.
            token: Trello API token.
            base_url: API root, overridable for tests.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport (e.g. httpx.MockTransport).
        """
        self._api_key = api_key
        self._token = token
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport
        self._http: Optional[httpx.Client] = None

    def _get_http(self) -> httpx.Client:
        """Get or create the HTTP client."""
        if self._http is None:
            auth = f'OAuth oauth_consumer_key="{self._api_key}", oauth_token="{self._token}"'
            self._http = httpx.Client(
                base_url=self._base_url,
                timeout=self._timeout,
                headers={"Authorization": auth, "Accept": "application/json"},
                transport=self._transport,
            )
        return self._http

    def close(self) -> None:
        if self._http is not None:
            self._http.close()
            self._http = None

    def __enter__(self) -> "TrelloClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _handle_status_error(self, error: httpx.HTTPStatusError, resource: str) -> None:
        """Convert an HTTP error response to the appropriate exception.

        Raises:
            TrelloAuthError: On 401.
            TrelloNotFoundError: On 404.
            RateLimitError: On 429.
            TrelloAPIError: For other API errors.
        """
        response = error.response
        status_code = response.status_code
        reason = response.text.strip() or response.reason_phrase
        logger.error("Trello API error (status=%d) for %s: %s", status_code, resource, reason)

        if status_code == 401:
            raise TrelloAuthError(f"Trello rejected credentials for {resource}: {reason}") from error
        elif status_code == 404:
            raise TrelloNotFoundError(resource) from error
        elif status_code == 429:
            retry_after = response.headers.get("retry-after")
            raise RateLimitError(
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None
            ) from error
        else:
            raise TrelloAPIError(
                f"{resource}: Trello API error: {reason}",
                status_code=status_code,
                reason=reason,
            ) from error

    def _get(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        """GET a path and decode the JSON body."""
        try:
            response = self._get_http().get(path, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            self._handle_status_error(e, path)
            raise  # Never reached, but satisfies type checker
        except httpx.HTTPError as e:
            logger.error("Trello request for %s failed: %s", path, e)
            raise TrelloAPIError(f"{path}: request failed: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise TrelloAPIError(f"{path}: response is not JSON", status_code=response.status_code) from e

    @staticmethod
    def _parse_list(path: str, data: Any, parser: Callable[[dict[str, Any]], T]) -> list[T]:
        """Build models from a JSON array, rejecting malformed payloads.

        Raises:
            TrelloAPIError: If the body is not a list of well-formed objects.
        """
        if not isinstance(data, list):
            raise TrelloAPIError(f"{path}: expected a JSON array, got {type(data).__name__}")
        try:
            return [parser(entry) for entry in data]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.error("Malformed Trello payload from %s: %r", path, e)
            raise TrelloAPIError(f"{path}: malformed payload: {e!r}") from e

    # -------------------- Public API --------------------

    def get_board_cards(self, board_id: str) -> list[Card]:
        """Get the open cards on a board.

        Args:
            board_id: Trello board ID.

        Returns:
            List of Card objects.

        Raises:
            BoardNotFoundError: If the board doesn't exist.
            TrelloError: If the API call fails.
        """
        path = f"/boards/{board_id}/cards"
        try:
            data = self._get(path, {"fields": CARD_FIELDS})
        except TrelloNotFoundError as e:
            raise BoardNotFoundError(board_id) from e

        cards = self._parse_list(path, data, Card.from_api_response)
        logger.debug("Fetched %d cards from board %s", len(cards), board_id, extra={"board_id": board_id})
        return cards

    def get_card_checklists(self, card_id: str) -> list[Checklist]:
        """Get the checklists of a card, including their items.

        Args:
            card_id: Trello card ID.

        Returns:
            List of Checklist objects.

        Raises:
            TrelloError: If the API call fails.
        """
        path = f"/cards/{card_id}/checklists"
        data = self._get(path, {"checkItems": "all", "checkItem_fields": CHECK_ITEM_FIELDS})
        return self._parse_list(path, data, Checklist.from_api_response)
