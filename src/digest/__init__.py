"""Digest module for per-assignee due-item reports.

This module buckets due cards and checklist items relative to a reference
instant (Overdue, Today, This Week, Future), renders them as plain text
and HTML, and delivers them by email.

Public API:
    DigestReporter: Builds, formats and sends digests.
    DueItem: A card or checklist item with a deadline.
    Bucket: The time windows items are grouped into.
    DigestReport: Structured digest for one assignee.
    DigestSection: A section (or This Week day-group) of a digest.
    DeliveryResult: Result of delivering one assignee's digest.
    classify, sort_items, group_items: Pure bucketing functions.
    render_label, render_plain_text, render_html: Pure rendering functions.
    DigestError: Base exception for module errors.
    InvalidItemError: Raised for items without a due timestamp.
    DigestDeliveryError: Raised when delivery fails.
"""

from .classifier import classify, group_items, sort_items
from .digest_reporter import DigestReporter
from .exceptions import DigestDeliveryError, DigestError, InvalidItemError
from .formatter import render_html, render_label, render_plain_text
from .models import Bucket, DeliveryResult, DigestReport, DigestSection, DueItem

__all__ = [
    "DigestReporter",
    "DueItem",
    "Bucket",
    "DigestReport",
    "DigestSection",
    "DeliveryResult",
    "classify",
    "sort_items",
    "group_items",
    "render_label",
    "render_plain_text",
    "render_html",
    "DigestError",
    "InvalidItemError",
    "DigestDeliveryError",
]
