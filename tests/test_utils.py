"""Tests for display formatting and template rendering."""

from __future__ import annotations

from datetime import date, datetime

from gratitude.models import GratitudeEntry, Quote
from gratitude.utils import (
    format_entry_date,
    format_entry_datetime,
    format_header_date,
    format_stats,
    render_empty_history_html,
    render_entry_detail_html,
    render_quote_html,
)


def make_entry(**kwargs) -> GratitudeEntry:
    defaults = dict(
        id=7,
        entry_text="Grateful for <b>bold</b> friends\nand family",
        created_date=date(2026, 10, 18),
        created_datetime=datetime(2026, 10, 18, 21, 5),
    )
    defaults.update(kwargs)
    return GratitudeEntry(**defaults)


def test_date_formatting():
    """Dates and times render in the journal's display formats."""
    assert format_entry_date(date(2026, 3, 5)) == "March 5, 2026"
    assert format_header_date(date(2026, 10, 18)) == "Sunday, October 18, 2026"
    assert format_entry_datetime(datetime(2026, 10, 18, 21, 5)) == "Oct 18, 2026 at 9:05 PM"
    assert format_entry_datetime(datetime(2026, 10, 18, 0, 30)) == "Oct 18, 2026 at 12:30 AM"


def test_format_stats():
    """Stats render as a short summary line."""
    assert format_stats(12, 2) == "Total: 12 | Today: 2"


def test_entry_preview():
    """Previews keep short text and cut long text with an ellipsis."""
    entry = make_entry(entry_text="Short")
    assert entry.preview(10) == "Short"
    assert make_entry(entry_text="abcdefghij").preview(4) == "abcd..."


def test_tag_list():
    """Tag strings split into a clean list."""
    assert make_entry(tags=" a, ,b ").tag_list() == ["a", "b"]
    assert make_entry().tag_list() == []


def test_entry_detail_escapes_text_and_shows_details():
    """Entry detail escapes markup, keeps line breaks and shows mood and tags."""
    html = render_entry_detail_html(make_entry(mood_rating=5, tags="friends"))
    assert "&lt;b&gt;bold&lt;/b&gt;" in html
    assert "friends<br>and family" in html
    assert "&lt;br&gt;" not in html
    assert "October 18, 2026" in html
    assert "5 - Wonderful" in html
    assert "#friends" in html


def test_entry_detail_without_mood():
    """Entries without a mood say so."""
    html = render_entry_detail_html(make_entry(), dark_mode=True)
    assert "No rating" in html
    assert "#dfe6e9" in html


def test_quote_rendering():
    """Quotes render escaped with their author."""
    html = render_quote_html(Quote("Stay <curious>", "Anon"))
    assert "Stay &lt;curious&gt;" in html
    assert "Anon" in html


def test_empty_history():
    """The empty history message invites a first entry."""
    assert "No gratitude entries yet" in render_empty_history_html(False)
