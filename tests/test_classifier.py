"""Unit tests for due-item bucketing."""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from src.digest import Bucket, DueItem, InvalidItemError, classify, group_items, sort_items
from src.digest.dates import align, end_of_week

# Monday
MONDAY = datetime(2024, 6, 10, 9, 0)
TUESDAY = datetime(2024, 6, 11, 9, 0)
SUNDAY = datetime(2024, 6, 16, 10, 0)


# ==================== DueItem Tests ====================


class TestDueItem:
    """Tests for the DueItem model."""

    def test_defaults(self):
        item = DueItem(text="Ship it", due=MONDAY)

        assert item.is_top_level is True
        assert item.parent_name is None

    def test_missing_due_rejected(self):
        """Items without a due timestamp fail loudly instead of being dropped."""
        with pytest.raises(InvalidItemError) as exc_info:
            DueItem(text="No date", due=None)

        assert exc_info.value.text == "No date"
        assert "missing due" in str(exc_info.value)

    def test_date_instead_of_datetime_rejected(self):
        with pytest.raises(InvalidItemError):
            DueItem(text="Date only", due=date(2024, 6, 10))

    def test_is_immutable(self):
        item = DueItem(text="Frozen", due=MONDAY)

        with pytest.raises(AttributeError):
            item.text = "Changed"

    def test_dict_roundtrip(self):
        item = DueItem(text="Sub", due=MONDAY, is_top_level=False, parent_name="Card")

        assert DueItem.from_dict(item.to_dict()) == item


# ==================== Date Helper Tests ====================


class TestEndOfWeek:
    """Tests for the end-of-week boundary."""

    def test_monday_ends_on_sunday(self):
        assert end_of_week(MONDAY) == date(2024, 6, 16)

    def test_saturday_ends_next_day(self):
        assert end_of_week(datetime(2024, 6, 15, 23, 0)) == date(2024, 6, 16)

    def test_sunday_collapses_to_today(self):
        assert end_of_week(SUNDAY) == date(2024, 6, 16)


class TestAlign:
    """Tests for timezone alignment of due timestamps."""

    def test_naive_pair_unchanged(self):
        due = datetime(2024, 6, 10, 12, 0)
        assert align(due, MONDAY) is due

    def test_aware_due_converted_to_now_zone(self):
        now = datetime(2024, 6, 10, 9, 0, tzinfo=ZoneInfo("America/New_York"))
        due = datetime(2024, 6, 11, 2, 0, tzinfo=timezone.utc)

        aligned = align(due, now)

        assert aligned.date() == date(2024, 6, 10)
        assert aligned.hour == 22

    def test_naive_due_read_in_now_zone(self):
        tz = ZoneInfo("Europe/Berlin")
        now = datetime(2024, 6, 10, 9, 0, tzinfo=tz)

        aligned = align(datetime(2024, 6, 10, 18, 0), now)

        assert aligned.tzinfo is tz
        assert aligned.hour == 18

    def test_aware_due_with_naive_now_becomes_naive_local(self):
        due = datetime(2024, 6, 10, 12, 0, tzinfo=timezone.utc)

        aligned = align(due, MONDAY)

        assert aligned.tzinfo is None
        assert aligned == due.astimezone().replace(tzinfo=None)


# ==================== Classify Tests ====================


class TestClassify:
    """Tests for bucket assignment."""

    def test_yesterday_is_overdue(self):
        assert classify(datetime(2024, 6, 9, 10, 0), MONDAY) == (Bucket.OVERDUE, None)

    def test_earlier_today_is_today_not_overdue(self):
        """Calendar-date equality wins over the strict time comparison."""
        now = datetime(2024, 6, 12, 15, 0)
        due = datetime(2024, 6, 12, 9, 0)

        assert due < now
        assert classify(due, now) == (Bucket.TODAY, None)

    def test_later_today_is_today(self):
        assert classify(datetime(2024, 6, 10, 23, 59), MONDAY) == (Bucket.TODAY, None)

    def test_start_of_today_is_today(self):
        assert classify(datetime(2024, 6, 10, 0, 0), MONDAY) == (Bucket.TODAY, None)

    def test_tomorrow_is_this_week_with_day_key(self):
        assert classify(datetime(2024, 6, 11, 8, 0), MONDAY) == (
            Bucket.THIS_WEEK,
            date(2024, 6, 11),
        )

    @pytest.mark.parametrize("hour,minute", [(0, 0), (12, 0), (23, 59)])
    def test_coming_sunday_is_this_week(self, hour, minute):
        """The coming Sunday is inside the week window at any time of day."""
        due = datetime(2024, 6, 16, hour, minute)

        assert classify(due, TUESDAY) == (Bucket.THIS_WEEK, date(2024, 6, 16))

    def test_next_monday_is_future(self):
        assert classify(datetime(2024, 6, 17, 0, 0), TUESDAY) == (Bucket.FUTURE, None)

    def test_on_sunday_tomorrow_is_future(self):
        """On a Sunday the week window holds only today."""
        assert classify(datetime(2024, 6, 17, 9, 0), SUNDAY) == (Bucket.FUTURE, None)

    def test_on_sunday_later_today_is_today(self):
        assert classify(datetime(2024, 6, 16, 20, 0), SUNDAY) == (Bucket.TODAY, None)

    def test_far_past_is_overdue(self):
        assert classify(datetime(2020, 1, 1), MONDAY)[0] is Bucket.OVERDUE

    def test_far_future_is_future(self):
        assert classify(datetime(2030, 1, 1), MONDAY)[0] is Bucket.FUTURE

    def test_every_offset_gets_exactly_one_bucket(self):
        """Every timestamp across three weeks lands in a known bucket."""
        start = MONDAY - timedelta(days=10)
        seen = set()
        for hours in range(0, 24 * 21, 5):
            bucket, day = classify(start + timedelta(hours=hours), MONDAY)
            assert bucket in Bucket
            assert (day is not None) == (bucket is Bucket.THIS_WEEK)
            seen.add(bucket)

        assert seen == set(Bucket)

    def test_uses_now_zone_for_calendar_dates(self):
        """A UTC timestamp on the next day is still 'today' in New York."""
        now = datetime(2024, 6, 10, 9, 0, tzinfo=ZoneInfo("America/New_York"))
        due = datetime(2024, 6, 11, 2, 0, tzinfo=timezone.utc)

        assert classify(due, now) == (Bucket.TODAY, None)

    def test_aware_overdue(self):
        now = datetime(2024, 6, 10, 9, 0, tzinfo=timezone.utc)
        due = datetime(2024, 6, 9, 23, 0, tzinfo=timezone.utc)

        assert classify(due, now) == (Bucket.OVERDUE, None)


# ==================== Sort Tests ====================


class TestSortItems:
    """Tests for the stable due-time sort."""

    def test_sorts_ascending(self):
        items = [
            DueItem(text="c", due=datetime(2024, 6, 12)),
            DueItem(text="a", due=datetime(2024, 6, 10)),
            DueItem(text="b", due=datetime(2024, 6, 11)),
        ]

        assert [i.text for i in sort_items(items)] == ["a", "b", "c"]

    def test_ties_keep_input_order(self):
        same = datetime(2024, 6, 11, 10, 0)
        items = [
            DueItem(text="second-in-time", due=datetime(2024, 6, 11, 11, 0)),
            DueItem(text="tie-1", due=same),
            DueItem(text="tie-2", due=same),
            DueItem(text="tie-3", due=same),
        ]

        assert [i.text for i in sort_items(items)] == ["tie-1", "tie-2", "tie-3", "second-in-time"]

    def test_returns_new_list(self):
        items = [DueItem(text="b", due=TUESDAY), DueItem(text="a", due=MONDAY)]

        result = sort_items(items)

        assert result is not items
        assert [i.text for i in items] == ["b", "a"]

    def test_mixed_awareness_with_now(self):
        now = datetime(2024, 6, 10, 9, 0, tzinfo=timezone.utc)
        items = [
            DueItem(text="aware", due=datetime(2024, 6, 10, 10, 0, tzinfo=timezone.utc)),
            DueItem(text="naive", due=datetime(2024, 6, 10, 8, 0)),
        ]

        assert [i.text for i in sort_items(items, now)] == ["naive", "aware"]

    def test_mixed_awareness_without_now(self):
        # Two days apart, so the host's local offset cannot reorder them.
        items = [
            DueItem(text="aware", due=datetime(2024, 6, 12, 10, 0, tzinfo=timezone.utc)),
            DueItem(text="naive", due=datetime(2024, 6, 10, 10, 0)),
            DueItem(text="aware-later", due=datetime(2024, 6, 14, 10, 0, tzinfo=timezone.utc)),
        ]

        assert [i.text for i in sort_items(items)] == ["naive", "aware", "aware-later"]


# ==================== Group Tests ====================


class TestGroupItems:
    """Tests for grouping into sections and day-groups."""

    def test_empty(self):
        assert group_items([], MONDAY) == []

    def test_section_order(self):
        items = [
            DueItem(text="future", due=datetime(2024, 6, 20, 10, 0)),
            DueItem(text="week", due=datetime(2024, 6, 14, 10, 0)),
            DueItem(text="today", due=datetime(2024, 6, 10, 8, 0)),
            DueItem(text="overdue", due=datetime(2024, 6, 9, 10, 0)),
        ]

        sections = group_items(items, MONDAY)

        assert [s.bucket for s in sections] == [
            Bucket.OVERDUE,
            Bucket.TODAY,
            Bucket.THIS_WEEK,
            Bucket.FUTURE,
        ]

    def test_empty_buckets_suppressed(self):
        items = [DueItem(text="week", due=datetime(2024, 6, 12, 10, 0))]

        sections = group_items(items, MONDAY)

        assert [s.bucket for s in sections] == [Bucket.THIS_WEEK]

    def test_day_groups_ascending_regardless_of_input_order(self):
        items = [
            DueItem(text="sat", due=datetime(2024, 6, 15, 9, 0)),
            DueItem(text="wed", due=datetime(2024, 6, 12, 9, 0)),
            DueItem(text="tue-late", due=datetime(2024, 6, 11, 18, 0)),
            DueItem(text="tue-early", due=datetime(2024, 6, 11, 7, 0)),
        ]

        (week,) = group_items(items, MONDAY)

        assert [g.day for g in week.groups] == [
            date(2024, 6, 11),
            date(2024, 6, 12),
            date(2024, 6, 15),
        ]
        assert [i.text for i in week.groups[0].items] == ["tue-early", "tue-late"]
        assert week.items == []
        assert week.count == 4

    def test_day_group_headings(self):
        items = [DueItem(text="fri", due=datetime(2024, 6, 14, 10, 0))]

        (week,) = group_items(items, MONDAY)

        assert week.heading == "**🗓 This Week**"
        assert week.groups[0].heading == "**Fri 06/14**"

    def test_today_heading_includes_date(self):
        items = [DueItem(text="t", due=datetime(2024, 6, 10, 12, 0))]

        (today,) = group_items(items, MONDAY)

        assert today.heading == "**📅 Today (06/10)**"

    def test_equal_timestamps_keep_order_within_bucket(self):
        same = datetime(2024, 6, 10, 17, 0)
        items = [
            DueItem(text="x", due=same),
            DueItem(text="early", due=datetime(2024, 6, 10, 8, 0)),
            DueItem(text="y", due=same),
        ]

        (today,) = group_items(items, MONDAY)

        assert [i.text for i in today.items] == ["early", "x", "y"]

    def test_regrouping_is_deterministic(self):
        items = [
            DueItem(text="a", due=datetime(2024, 6, 9, 10, 0)),
            DueItem(text="b", due=datetime(2024, 6, 13, 10, 0)),
            DueItem(text="c", due=datetime(2024, 6, 25, 10, 0)),
        ]

        first = [s.to_dict() for s in group_items(items, MONDAY)]
        second = [s.to_dict() for s in group_items(list(reversed(items)), MONDAY)]

        assert first == second
