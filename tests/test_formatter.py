"""Unit tests for digest rendering (labels, plain text, HTML)."""

import re
from datetime import datetime, timezone

import pytest

from src.digest import DigestReport, DueItem, group_items, render_html, render_label, render_plain_text
from src.digest.formatter import PRE_CLOSE, PRE_OPEN

MONDAY = datetime(2024, 6, 10, 9, 0)


def _report(items, now=MONDAY) -> DigestReport:
    return DigestReport(generated_at=now, assignee="member1", sections=group_items(items, now))


def _strip_html(html: str) -> str:
    """Undo the bold conversion and the wrapper."""
    assert html.startswith(PRE_OPEN) and html.endswith(PRE_CLOSE)
    inner = html[len(PRE_OPEN):-len(PRE_CLOSE)]
    return re.sub(r"</?b>", "**", inner)


@pytest.fixture
def scenario_items():
    """Items covering every bucket relative to MONDAY."""
    return [
        DueItem(text="A", due=datetime(2024, 6, 9, 10, 0), is_top_level=True),
        DueItem(text='B (from "C")', due=datetime(2024, 6, 10, 8, 0), is_top_level=False),
        DueItem(text="D", due=datetime(2024, 6, 14, 10, 0), is_top_level=True),
        DueItem(text="E", due=datetime(2024, 6, 20, 10, 0), is_top_level=True),
    ]


# ==================== Label Tests ====================


class TestRenderLabel:
    """Tests for single-item labels."""

    def test_card(self):
        item = DueItem(text="Write report", due=MONDAY)

        assert render_label(item) == "🃏 Write report"

    def test_card_text_kept_verbatim(self):
        item = DueItem(text='Odd (from "x") name', due=MONDAY, is_top_level=True)

        assert render_label(item) == '🃏 Odd (from "x") name'

    def test_annotated_checklist_item(self):
        item = DueItem(text='Draft intro (from "Quarterly report")', due=MONDAY, is_top_level=False)

        assert render_label(item) == "✔ Draft intro (🃏 Quarterly report)"

    def test_unannotated_checklist_item_falls_back(self):
        item = DueItem(text="Loose item", due=MONDAY, is_top_level=False)

        assert render_label(item) == "✔ Loose item (🃏 Unknown)"

    def test_structured_parent_name(self):
        item = DueItem(text="Draft intro", due=MONDAY, is_top_level=False, parent_name="Quarterly report")

        assert render_label(item) == "✔ Draft intro (🃏 Quarterly report)"

    def test_structured_parent_wins_and_annotation_is_stripped(self):
        item = DueItem(
            text='Draft intro (from "Old name")',
            due=MONDAY,
            is_top_level=False,
            parent_name="New name",
        )

        assert render_label(item) == "✔ Draft intro (🃏 New name)"

    def test_empty_parent_name_falls_back(self):
        item = DueItem(text="Orphan", due=MONDAY, is_top_level=False, parent_name="")

        assert render_label(item) == "✔ Orphan (🃏 Unknown)"


# ==================== Plain Text Tests ====================


class TestRenderPlainText:
    """Tests for plain text section assembly."""

    def test_end_to_end_scenario(self, scenario_items):
        text = render_plain_text(_report(scenario_items))

        assert text == "\n".join(
            [
                "**🔥 Overdue**",
                "  🃏 A",
                "",
                "**📅 Today (06/10)**",
                "  ✔ B (🃏 C)",
                "",
                "**🗓 This Week**",
                "  **Fri 06/14**",
                "    🃏 D",
                "",
                "**🔮 Future**",
                "  🃏 E (Thu 06/20)",
            ]
        )

    def test_input_order_does_not_matter(self, scenario_items):
        forward = render_plain_text(_report(scenario_items))
        backward = render_plain_text(_report(list(reversed(scenario_items))))

        assert forward == backward

    def test_empty_report(self):
        assert render_plain_text(_report([])) == ""

    def test_no_leading_blank_line(self):
        items = [DueItem(text="Week", due=datetime(2024, 6, 12, 10, 0))]

        text = render_plain_text(_report(items))

        assert text.startswith("**🗓 This Week**")

    def test_overdue_header_suppressed_when_empty(self):
        items = [DueItem(text="Now", due=datetime(2024, 6, 10, 12, 0))]

        text = render_plain_text(_report(items))

        assert "Overdue" not in text
        assert "Future" not in text

    def test_future_header_suppressed_when_empty(self, scenario_items):
        text = render_plain_text(_report(scenario_items[:3]))

        assert "Future" not in text
        assert text.endswith("    🃏 D")

    def test_multiple_day_groups(self):
        items = [
            DueItem(text="Thu task", due=datetime(2024, 6, 13, 10, 0)),
            DueItem(text="Tue task", due=datetime(2024, 6, 11, 10, 0)),
            DueItem(text="Tue sub", due=datetime(2024, 6, 11, 12, 0), is_top_level=False, parent_name="Card"),
        ]

        text = render_plain_text(_report(items))

        assert text.split("\n") == [
            "**🗓 This Week**",
            "  **Tue 06/11**",
            "    🃏 Tue task",
            "    ✔ Tue sub (🃏 Card)",
            "  **Thu 06/13**",
            "    🃏 Thu task",
        ]

    def test_future_suffix_uses_report_timezone(self):
        """A UTC timestamp is shown on the report's calendar day."""
        from zoneinfo import ZoneInfo

        now = datetime(2024, 6, 10, 9, 0, tzinfo=ZoneInfo("America/Los_Angeles"))
        items = [DueItem(text="Late", due=datetime(2024, 6, 21, 3, 0, tzinfo=timezone.utc))]

        text = render_plain_text(_report(items, now=now))

        assert "🃏 Late (Thu 06/20)" in text


# ==================== HTML Tests ====================


class TestRenderHtml:
    """Tests for the HTML rendering of plain text digests."""

    def test_wraps_in_monospace_pre(self):
        html = render_html("**🔥 Overdue**\n  🃏 A")

        assert html.startswith(PRE_OPEN)
        assert html.endswith(PRE_CLOSE)
        assert "monospace" in PRE_OPEN

    def test_converts_bold(self):
        html = render_html("**Heading**\n  item")

        assert "<b>Heading</b>" in html
        assert "**" not in html

    def test_bold_inside_indented_line(self):
        html = render_html("**This Week**\n  **Fri 06/14**\n    🃏 D")

        assert "  <b>Fri 06/14</b>" in html

    def test_inserts_blank_line_between_headers(self):
        html = render_html("**A**\n  x\n**B**\n  y")

        assert html == PRE_OPEN + "<b>A</b>\n  x\n\n<b>B</b>\n  y" + PRE_CLOSE

    def test_no_blank_line_before_first_header(self):
        html = render_html("**A**\n  x")

        assert html.startswith(PRE_OPEN + "<b>A</b>")

    def test_day_headers_do_not_get_blank_lines(self):
        html = render_html("**This Week**\n  **Tue 06/11**\n    a\n  **Wed 06/12**\n    b")

        assert "\n\n" not in html

    def test_text_equivalence(self, scenario_items):
        text = render_plain_text(_report(scenario_items))

        assert _strip_html(render_html(text)) == text

    def test_idempotent(self, scenario_items):
        once = render_html(render_plain_text(_report(scenario_items)))

        assert render_html(once) == once

    def test_escapes_markup_in_item_text(self):
        html = render_html("**Today**\n  🃏 R&D <draft> review")

        assert "🃏 R&amp;D &lt;draft&gt; review" in html

    def test_escaping_not_doubled_on_second_pass(self):
        once = render_html("**Today**\n  🃏 R&D <draft>")

        twice = render_html(once)

        assert twice == once
        assert "&amp;amp;" not in twice

    def test_existing_entities_left_alone(self):
        html = render_html("  🃏 Fish &amp; chips")

        assert "Fish &amp; chips" in html
