"""Rendering of digest reports as plain text and HTML.

Plain text uses a lightweight ``**bold**`` convention for headings; the
HTML renderer turns that into ``<b>`` tags inside a monospace block, so
both variants line up character for character.
"""

import re
from datetime import date, datetime

from .dates import align, day_label, month_day
from .models import Bucket, DigestReport, DueItem

CARD_MARKER = "🃏"
CHECK_MARKER = "✔"
UNKNOWN_PARENT = "Unknown"
INDENT = "  "

_FIXED_HEADINGS = {
    Bucket.OVERDUE: "**🔥 Overdue**",
    Bucket.THIS_WEEK: "**🗓 This Week**",
    Bucket.FUTURE: "**🔮 Future**",
}

# Legacy checklist text embeds its card as: Item name (from "Card name")
_FROM_ANNOTATION = re.compile(r'\s*\(from "([^"]*)"\)')

PRE_OPEN = '<pre style="font-family: monospace; font-size: 14px;">'
PRE_CLOSE = "</pre>"

_BOLD = re.compile(r"\*\*(.+?)\*\*")
_BARE_AMP = re.compile(r"&(?!(?:[A-Za-z][A-Za-z0-9]*|#[0-9]+|#[xX][0-9A-Fa-f]+);)")
_BARE_LT = re.compile(r"<(?!/?b>)")
_BARE_GT = re.compile(r"(?<!<b)(?<!</b)>")


def section_heading(bucket: Bucket, now: datetime) -> str:
    """Heading line for a top-level section."""
    if bucket is Bucket.TODAY:
        return f"**📅 Today ({month_day(now.date())})**"
    return _FIXED_HEADINGS[bucket]


def day_group_heading(day: date) -> str:
    """Heading line for a This Week day-group, e.g. ``**Fri 06/14**``."""
    return f"**{day_label(day)}**"


def render_label(item: DueItem) -> str:
    """Render one item as a single display line.

    Cards render as ``🃏 <name>``. Checklist items render as
    ``✔ <name> (🃏 <card>)``, taking the card from ``parent_name`` or,
    failing that, from a ``(from "<card>")`` annotation in the text.
    The annotation is always stripped from the displayed name.
    """
    if item.is_top_level:
        return f"{CARD_MARKER} {item.text}"

    parent = item.parent_name
    match = _FROM_ANNOTATION.search(item.text)
    if match and parent is None:
        parent = match.group(1)
    text = _FROM_ANNOTATION.sub("", item.text)
    return f"{CHECK_MARKER} {text} ({CARD_MARKER} {parent or UNKNOWN_PARENT})"


def render_plain_text(report: DigestReport) -> str:
    """Render a report as plain text.

    Sections are separated by a single blank line. Day-group headings are
    indented one level and their items two; every other item one level.
    Future items carry their due day since no heading supplies it.

    Args:
        report: Report to render.

    Returns:
        The report text, or an empty string for an empty report.
    """
    lines: list[str] = []
    for section in report.sections:
        if lines:
            lines.append("")
        lines.append(section.heading)

        for item in section.items:
            line = INDENT + render_label(item)
            if section.bucket is Bucket.FUTURE:
                due_day = align(item.due, report.generated_at).date()
                line += f" ({day_label(due_day)})"
            lines.append(line)

        for group in section.groups:
            lines.append(INDENT + group.heading)
            lines.extend(INDENT * 2 + render_label(item) for item in group.items)

    return "\n".join(lines)


def _is_section_header(line: str) -> bool:
    return line.startswith("**") or line.startswith("<b>")


def _escape(text: str) -> str:
    """Escape markup characters, leaving entities and <b> tags alone."""
    text = _BARE_AMP.sub("&amp;", text)
    text = _BARE_LT.sub("&lt;", text)
    return _BARE_GT.sub("&gt;", text)


def render_html(text: str) -> str:
    """Render plain-text digest output as an HTML fragment.

    Converts ``**bold**`` to ``<b>bold</b>``, makes sure every section
    header after the first is preceded by a blank line, and wraps the
    result in a monospace ``<pre>`` block. Applying it to its own output
    returns that output unchanged.

    Args:
        text: Output of render_plain_text (or of this function).

    Returns:
        HTML fragment.
    """
    if text.startswith(PRE_OPEN) and text.endswith(PRE_CLOSE):
        text = text[len(PRE_OPEN):-len(PRE_CLOSE)]

    lines: list[str] = []
    for line in _escape(text).split("\n"):
        if _is_section_header(line) and lines and lines[-1].strip():
            lines.append("")
        lines.append(_BOLD.sub(r"<b>\1</b>", line))

    return PRE_OPEN + "\n".join(lines) + PRE_CLOSE
