"""Calendar helpers shared by bucketing and rendering."""

from datetime import date, datetime, timedelta

# e.g. "Fri 06/14"
DAY_LABEL_FORMAT = "%a %m/%d"


def align(due: datetime, now: datetime) -> datetime:
    """Express ``due`` in the same timezone convention as ``now``.

    A naive ``now`` means local wall-clock time; a naive ``due`` against an
    aware ``now`` is read as wall-clock time in ``now``'s zone.
    """
    if now.tzinfo is not None:
        if due.tzinfo is None:
            return due.replace(tzinfo=now.tzinfo)
        return due.astimezone(now.tzinfo)
    if due.tzinfo is not None:
        return due.astimezone().replace(tzinfo=None)
    return due


def end_of_week(now: datetime) -> date:
    """Return the coming Sunday, or today if today is Sunday."""
    return now.date() + timedelta(days=6 - now.weekday())


def day_label(day: date) -> str:
    return day.strftime(DAY_LABEL_FORMAT)


def month_day(day: date) -> str:
    return day.strftime("%m/%d")
