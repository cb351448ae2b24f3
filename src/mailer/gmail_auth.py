"""Gmail API authentication for sending digests."""

import logging
import os
from pathlib import Path
from typing import Optional

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import Resource, build

from .exceptions import NonInteractiveAuthError, ScopeMismatchError

logger = logging.getLogger(__name__)

GMAIL_SEND_SCOPE = "https://www.googleapis.com/auth/gmail.send"


class GmailAuthenticator:
    """Builds an authorized Gmail API service with the send scope.

    Credentials and token locations are configurable, the service is
    created lazily, and unattended runs can refuse to open a browser.
    """

    def __init__(
        self,
        credentials_path: Optional[Path] = None,
        token_path: Optional[Path] = None,
        scopes: Optional[list[str]] = None,
        interactive: bool = True,
    ):
        """Initialize the authenticator.

        Args:
            credentials_path: Path to OAuth client secrets JSON.
                Defaults to GMAIL_CREDENTIALS_PATH env var, or config/credentials.json.
            token_path: Path to store/load the access token.
                Defaults to GMAIL_TOKEN_PATH env var, or config/token.json.
            scopes: Gmail API scopes to request. Defaults to the send scope.
            interactive: If False, raise instead of starting the OAuth flow.
                GMAIL_NON_INTERACTIVE env var also disables it.
        """
        project_root = Path(__file__).parent.parent.parent

        if credentials_path:
            self._credentials_path = credentials_path
        elif os.environ.get("GMAIL_CREDENTIALS_PATH"):
            self._credentials_path = Path(os.environ["GMAIL_CREDENTIALS_PATH"])
        else:
            self._credentials_path = project_root / "config" / "credentials.json"

        if token_path:
            self._token_path = token_path
        elif os.environ.get("GMAIL_TOKEN_PATH"):
            self._token_path = Path(os.environ["GMAIL_TOKEN_PATH"])
        else:
            self._token_path = project_root / "config" / "token.json"

        self._scopes = scopes or [GMAIL_SEND_SCOPE]
        self._service: Optional[Resource] = None
        self._credentials: Optional[Credentials] = None

        self._interactive = interactive and not os.environ.get("GMAIL_NON_INTERACTIVE")

    def _validate_token_scopes(self, creds: Credentials) -> bool:
        """Check the stored token was granted every scope we request."""
        granted = creds.granted_scopes or creds.scopes
        if not granted:
            return False
        return all(scope in granted for scope in self._scopes)

    def _load_or_refresh_credentials(self) -> Credentials:
        """Load the stored token, refreshing or re-authorizing as needed.

        Returns:
            Valid credentials object

        Raises:
            FileNotFoundError: If the client secrets file doesn't exist
            ScopeMismatchError: If token scopes don't match and non-interactive
            NonInteractiveAuthError: If re-auth needed but in non-interactive mode
        """
        creds = None

        if self._token_path.exists():
            creds = Credentials.from_authorized_user_file(str(self._token_path), self._scopes)

            if creds and not self._validate_token_scopes(creds):
                if not self._interactive:
                    raise ScopeMismatchError(
                        required_scopes=self._scopes,
                        token_scopes=list(creds.scopes) if creds.scopes else [],
                    )
                logger.info("Stored token lacks required scopes, re-authorizing")
                self._token_path.unlink()
                creds = None

        if not creds or not creds.valid:
            if creds and creds.expired and creds.refresh_token:
                creds.refresh(Request())
            else:
                if not self._interactive:
                    reason = "No valid token exists" if not creds else "Token expired without refresh token"
                    raise NonInteractiveAuthError(reason)

                if not self._credentials_path.exists():
                    raise FileNotFoundError(
                        f"Credentials file not found at {self._credentials_path}. "
                        "Please download OAuth credentials from Google Cloud Console."
                    )
                flow = InstalledAppFlow.from_client_secrets_file(str(self._credentials_path), self._scopes)
                creds = flow.run_local_server(port=0)

            self._token_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._token_path, "w") as token_file:
                token_file.write(creds.to_json())

        return creds

    def get_service(self) -> Resource:
        """Get or create the Gmail API service.

        Returns:
            Gmail API service resource
        """
        if self._service is None:
            self._credentials = self._load_or_refresh_credentials()
            self._service = build("gmail", "v1", credentials=self._credentials)
        return self._service

    @property
    def credentials(self) -> Optional[Credentials]:
        """Access the current credentials (after service creation)."""
        return self._credentials
