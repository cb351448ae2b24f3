"""Exceptions for the digest module."""


class DigestError(Exception):
    """Base exception for digest errors."""

    pass


class InvalidItemError(DigestError):
    """Raised when a due item is constructed without a usable due timestamp."""

    def __init__(self, text: str, reason: str):
        self.text = text
        self.reason = reason
        super().__init__(f"Invalid due item '{text}': {reason}")


class DigestDeliveryError(DigestError):
    """Raised when unable to deliver the digest."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Failed to deliver digest: {reason}")
