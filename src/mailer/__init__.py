"""Gmail sending support for digest delivery.

Public API:
    - GmailAuthenticator: OAuth helper that builds a Gmail API service
    - GMAIL_SEND_SCOPE: Scope required to send mail
    - AuthenticationError: Base exception for auth failures
    - ScopeMismatchError: Token scopes don't match required scopes
    - NonInteractiveAuthError: Auth requires interaction but in non-interactive mode
"""

from .exceptions import (
    AuthenticationError,
    NonInteractiveAuthError,
    ScopeMismatchError,
)
from .gmail_auth import GMAIL_SEND_SCOPE, GmailAuthenticator

__all__ = [
    "GmailAuthenticator",
    "GMAIL_SEND_SCOPE",
    "AuthenticationError",
    "ScopeMismatchError",
    "NonInteractiveAuthError",
]
