"""DigestReporter for building and emailing per-assignee due-item digests."""

import base64
import logging
from datetime import datetime, tzinfo
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Iterable, Mapping, Optional

from googleapiclient.discovery import Resource
from googleapiclient.errors import HttpError

from src.mailer import GmailAuthenticator

from .classifier import group_items
from .exceptions import DigestDeliveryError
from .formatter import render_html, render_plain_text
from .models import DeliveryResult, DigestReport, DueItem

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = "📝 Your Trello Tasks for Today"


class DigestReporter:
    """Builds due-item digests and delivers them by email.

    Bucketing and rendering are pure; only send_email touches the network.
    """

    def __init__(
        self,
        authenticator: Optional[GmailAuthenticator] = None,
        gmail_service: Optional[Resource] = None,
        sender: Optional[str] = None,
        timezone: Optional[tzinfo] = None,
        subject: str = DEFAULT_SUBJECT,
    ):
        """Initialize the DigestReporter.

        Args:
            authenticator: GmailAuthenticator for sending digest emails.
                Created with the send scope if not provided.
            gmail_service: Pre-built Gmail API service resource.
                Overrides authenticator if provided.
            sender: Optional From header, e.g. '"Trello Bot" <bot@example.com>'.
            timezone: Zone the digest's calendar days are taken in.
                Defaults to the machine's local zone.
            subject: Email subject line.
        """
        self._authenticator = authenticator
        self._gmail_service = gmail_service
        self._sender = sender
        self._timezone = timezone
        self._subject = subject

    def _get_gmail_service(self) -> Resource:
        """Get or create the Gmail API service with send scope."""
        if self._gmail_service is None:
            if self._authenticator is None:
                self._authenticator = GmailAuthenticator()
            self._gmail_service = self._authenticator.get_service()
        return self._gmail_service

    def now(self) -> datetime:
        """Current time in the digest's timezone."""
        if self._timezone is None:
            return datetime.now().astimezone()
        return datetime.now(self._timezone)

    # -------------------- Public API --------------------

    def build_report(
        self,
        items: Iterable[DueItem],
        assignee: str = "",
        now: Optional[datetime] = None,
    ) -> DigestReport:
        """Build the digest report for one assignee.

        Args:
            items: The assignee's due items, in any order.
            assignee: Trello member ID, recorded on the report.
            now: Reference instant to bucket against. Defaults to now().

        Returns:
            DigestReport with non-empty sections in display order.
        """
        if now is None:
            now = self.now()
        return DigestReport(
            generated_at=now,
            assignee=assignee,
            sections=group_items(items, now),
        )

    def format_plain_text(self, report: DigestReport) -> str:
        """Format a digest report as plain text."""
        return render_plain_text(report)

    def format_html(self, report: DigestReport) -> str:
        """Format a digest report as an HTML fragment."""
        return render_html(render_plain_text(report))

    def send_email(self, report: DigestReport, recipient: str) -> str:
        """Send a digest report via email.

        Args:
            report: DigestReport to send.
            recipient: Email address to send the digest to.

        Returns:
            Gmail message ID of the sent email.

        Raises:
            DigestDeliveryError: If the email cannot be sent.
        """
        message = MIMEMultipart("alternative")
        message["to"] = recipient
        message["subject"] = self._subject
        if self._sender:
            message["from"] = self._sender
        message.attach(MIMEText(self.format_plain_text(report), "plain", "utf-8"))
        message.attach(MIMEText(self.format_html(report), "html", "utf-8"))
        raw = base64.urlsafe_b64encode(message.as_bytes()).decode()

        try:
            service = self._get_gmail_service()
            result = (
                service.users()
                .messages()
                .send(userId="me", body={"raw": raw})
                .execute()
            )
        except HttpError as e:
            raise DigestDeliveryError(str(e)) from e

        logger.info(
            "Sent digest for %s to %s (id=%s)",
            report.assignee,
            recipient,
            result["id"],
            extra={"assignee": report.assignee},
        )
        return result["id"]

    def deliver(
        self,
        assignee: str,
        items: Iterable[DueItem],
        recipient: Optional[str],
        now: Optional[datetime] = None,
        dry_run: bool = False,
    ) -> DeliveryResult:
        """Build, format and send one assignee's digest.

        Problems are recorded on the returned result rather than raised,
        so one assignee can never block another.

        Args:
            assignee: Trello member ID.
            items: The assignee's due items.
            recipient: Resolved email address, or None if unknown.
            now: Reference instant. Defaults to now().
            dry_run: Format only, never send.

        Returns:
            DeliveryResult for this assignee.
        """
        result = DeliveryResult(assignee=assignee, email_recipient=recipient or "")
        log_context = {"assignee": assignee}

        report = self.build_report(items, assignee=assignee, now=now)
        result.plain_text_output = self.format_plain_text(report)
        result.html_output = self.format_html(report)

        if report.is_empty:
            logger.info("No due items for %s; skipping email", assignee, extra=log_context)
            result.skipped = True
            return result

        if not recipient:
            logger.warning("No email address configured for member %s; skipping", assignee, extra=log_context)
            result.add_error(f"No email address for member {assignee}")
            return result

        if dry_run:
            logger.info("Dry run: not sending digest for %s to %s", assignee, recipient, extra=log_context)
            result.skipped = True
            return result

        try:
            result.email_message_id = self.send_email(report, recipient)
            result.email_sent = True
        except DigestDeliveryError as e:
            logger.error("Email delivery to %s failed: %s", recipient, e.reason, extra=log_context)
            result.add_error(f"Email delivery failed: {e.reason}")
        except Exception as e:
            # Auth problems surface here (missing credentials, expired token).
            logger.exception("Email delivery to %s failed", recipient, extra=log_context)
            result.add_error(f"Email delivery failed: {e}")

        return result

    def generate_and_send(
        self,
        items_by_assignee: Mapping[str, Iterable[DueItem]],
        recipients: Mapping[str, str],
        now: Optional[datetime] = None,
        dry_run: bool = False,
    ) -> list[DeliveryResult]:
        """Build and send a digest for every assignee.

        All digests share one reference instant so a run is consistent
        across recipients.

        Args:
            items_by_assignee: Due items keyed by Trello member ID.
            recipients: Email address keyed by Trello member ID.
            now: Reference instant. Defaults to now().
            dry_run: Format only, never send.

        Returns:
            One DeliveryResult per assignee, in assignee order.
        """
        if now is None:
            now = self.now()

        return [
            self.deliver(
                assignee,
                items,
                recipients.get(assignee),
                now=now,
                dry_run=dry_run,
            )
            for assignee, items in items_by_assignee.items()
        ]
