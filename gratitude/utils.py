"""Utility functions for formatting and rendering entries and quotes."""

from __future__ import annotations

from datetime import date, datetime

from gratitude.constants import (
    EMPTY_HISTORY_TEMPLATE,
    ENTRY_DETAIL_TEMPLATE,
    MOOD_DISPLAY_LOOKUP,
    QUOTE_TEMPLATE,
)
from gratitude.models import GratitudeEntry, Quote


def format_entry_date(day: date) -> str:
    """Render a date as e.g. ``October 18, 2026``."""
    return f"{day:%B} {day.day}, {day.year}"


def format_entry_datetime(moment: datetime) -> str:
    """Render a timestamp as e.g. ``Oct 18, 2026 at 9:05 AM``."""
    hour = moment.hour % 12 or 12
    return f"{moment:%b} {moment.day}, {moment.year} at {hour}:{moment:%M %p}"


def format_header_date(day: date) -> str:
    return f"{day:%A}, {format_entry_date(day)}"


def format_stats(total: int, today: int) -> str:
    return f"Total: {total} | Today: {today}"


def review_theme_colors(dark_mode: bool) -> dict[str, str]:
    """Choose review pane colors based on the current palette."""
    if dark_mode:
        return {
            "text": "#dfe6e9",
            "secondary": "#a4b0be",
            "divider": "#3a3f44",
        }
    return {
        "text": "#2d3436",
        "secondary": "#636e72",
        "divider": "#dfe6e9",
    }


def render_entry_detail_html(entry: GratitudeEntry, dark_mode: bool = False) -> str:
    """Render the selected gratitude entry via the Jinja2 template."""
    return ENTRY_DETAIL_TEMPLATE.render(
        colors=review_theme_colors(dark_mode),
        date_display=format_entry_date(entry.created_date),
        datetime_display=format_entry_datetime(entry.created_datetime),
        mood_display=MOOD_DISPLAY_LOOKUP.get(entry.mood_rating, "No rating"),
        tags=entry.tag_list(),
        body_text=entry.entry_text,
    )


def render_quote_html(quote: Quote, dark_mode: bool = False) -> str:
    return QUOTE_TEMPLATE.render(
        colors=review_theme_colors(dark_mode), text=quote.text, author=quote.author
    )


def render_empty_history_html(dark_mode: bool) -> str:
    """Render a friendly empty-state message that respects theme colors."""
    colors = review_theme_colors(dark_mode)
    return EMPTY_HISTORY_TEMPLATE.render(colors=colors)
