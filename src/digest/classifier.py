"""Bucketing of due items relative to a reference instant.

All functions here are pure: the reference instant ``now`` is always passed
in, so results never depend on the system clock.
"""

from datetime import date, datetime
from typing import Iterable, Optional

from .dates import align, end_of_week
from .formatter import day_group_heading, section_heading
from .models import Bucket, DigestSection, DueItem


def classify(due: datetime, now: datetime) -> tuple[Bucket, Optional[date]]:
    """Assign a due timestamp to exactly one bucket.

    Args:
        due: When the item is due.
        now: Reference instant the digest is generated for.

    Returns:
        The bucket, plus the due day when the bucket is THIS_WEEK
        (None otherwise).
    """
    due = align(due, now)
    today = now.date()
    due_day = due.date()

    # An item due earlier today stays in Today even though it has passed.
    if due < now and due_day != today:
        return Bucket.OVERDUE, None
    if due_day == today:
        return Bucket.TODAY, None
    if due_day <= end_of_week(now):
        return Bucket.THIS_WEEK, due_day
    return Bucket.FUTURE, None


def sort_items(items: Iterable[DueItem], now: Optional[datetime] = None) -> list[DueItem]:
    """Stable ascending sort by due timestamp.

    Args:
        items: Items in any order.
        now: If given, due timestamps are aligned to its timezone first.
            Without it, naive timestamps are read as local time, so naive
            and aware timestamps can still be mixed.

    Returns:
        New list; items with equal due timestamps keep their input order.
    """
    if now is None:
        return sorted(items, key=lambda item: item.due.astimezone())
    return sorted(items, key=lambda item: align(item.due, now))


def group_items(items: Iterable[DueItem], now: datetime) -> list[DigestSection]:
    """Sort, classify and group items into display sections.

    Sections come back in fixed order (Overdue, Today, This Week, Future)
    and only when non-empty. This Week holds one day-group per due day;
    because the items are sorted first and groups are opened in first-seen
    order, day-groups are ascending.

    Args:
        items: Items for a single assignee.
        now: Reference instant.

    Returns:
        List of non-empty DigestSections.
    """
    overdue: list[DueItem] = []
    today: list[DueItem] = []
    future: list[DueItem] = []
    day_groups: dict[date, DigestSection] = {}

    for item in sort_items(items, now):
        bucket, day = classify(item.due, now)
        if bucket is Bucket.OVERDUE:
            overdue.append(item)
        elif bucket is Bucket.TODAY:
            today.append(item)
        elif bucket is Bucket.THIS_WEEK:
            group = day_groups.get(day)
            if group is None:
                group = DigestSection(
                    heading=day_group_heading(day),
                    bucket=Bucket.THIS_WEEK,
                    day=day,
                )
                day_groups[day] = group
            group.items.append(item)
        else:
            future.append(item)

    sections = []
    if overdue:
        sections.append(
            DigestSection(heading=section_heading(Bucket.OVERDUE, now), bucket=Bucket.OVERDUE, items=overdue)
        )
    if today:
        sections.append(
            DigestSection(heading=section_heading(Bucket.TODAY, now), bucket=Bucket.TODAY, items=today)
        )
    if day_groups:
        sections.append(
            DigestSection(
                heading=section_heading(Bucket.THIS_WEEK, now),
                bucket=Bucket.THIS_WEEK,
                groups=list(day_groups.values()),
            )
        )
    if future:
        sections.append(
            DigestSection(heading=section_heading(Bucket.FUTURE, now), bucket=Bucket.FUTURE, items=future)
        )

    return sections
