"""Exceptions for the Trello module."""


class TrelloError(Exception):
    """Base exception for all Trello-related errors."""

    pass


class TrelloAuthError(TrelloError):
    """Raised when Trello rejects the API key or token."""

    pass


class TrelloAPIError(TrelloError):
    """Raised when a Trello API call fails."""

    def __init__(self, message: str, status_code: int | None = None, reason: str | None = None):
        self.status_code = status_code
        self.reason = reason
        super().__init__(message)


class TrelloNotFoundError(TrelloError):
    """Raised when a requested Trello resource does not exist."""

    def __init__(self, resource: str):
        self.resource = resource
        super().__init__(f"Trello resource '{resource}' not found")


class BoardNotFoundError(TrelloNotFoundError):
    """Raised when a configured board does not exist or is not visible."""

    def __init__(self, board_id: str):
        self.board_id = board_id
        super().__init__(f"boards/{board_id}")


class RateLimitError(TrelloError):
    """Raised when API rate limits are exceeded."""

    def __init__(self, retry_after: int | None = None):
        self.retry_after = retry_after
        msg = "Trello API rate limit exceeded"
        if retry_after:
            msg += f". Retry after {retry_after} seconds"
        super().__init__(msg)
