"""Configuration constants and templates for the application."""

from __future__ import annotations

import logging
from pathlib import Path
from textwrap import dedent

from jinja2 import DictLoader, Environment, select_autoescape

from gratitude.models import Quote

# Database and file paths
DATABASE_PATH = Path("dailygratitude.db")
ENTRY_CHARACTER_LIMIT = 2000
RECENT_ENTRIES_LIMIT = 10
QUOTE_HISTORY_LIMIT = 30

# Remote quote sources
ZENQUOTES_TODAY_URL = "https://zenquotes.io/api/today"
QUOTABLE_RANDOM_URL = "https://api.quotable.io/random?tags=motivational,inspirational"
QUOTE_REQUEST_TIMEOUT_SECONDS = 10
USER_AGENT = "DailyGratitude/1.0"

# Mood options with display labels and stored ratings
MOOD_CHOICES = [
    ("No rating", None),
    ("1 - Rough day", 1),
    ("2 - Low", 2),
    ("3 - Okay", 3),
    ("4 - Good", 4),
    ("5 - Wonderful", 5),
]

MOOD_DISPLAY_LOOKUP = {value: label for label, value in MOOD_CHOICES}

# Shown when every remote source is unavailable
FALLBACK_QUOTES: tuple[Quote, ...] = (
    Quote("Gratitude turns what we have into enough.", "Anonymous"),
    Quote(
        "The unthankful heart discovers no mercies; but the thankful heart will "
        "find, in every hour, some heavenly blessings.",
        "Henry Ward Beecher",
    ),
    Quote(
        "Gratitude is not only the greatest of virtues but the parent of all others.",
        "Cicero",
    ),
    Quote("Be thankful for what you have; you'll end up having more.", "Oprah Winfrey"),
    Quote(
        "Gratitude makes sense of our past, brings peace for today, and creates "
        "a vision for tomorrow.",
        "Melody Beattie",
    ),
    Quote(
        "Reflect upon your present blessings, of which every man has many - not "
        "on your past misfortunes, of which all men have some.",
        "Charles Dickens",
    ),
    Quote(
        "Give thanks not just on Thanksgiving Day, but every day of your life.",
        "Catherine Pulsifer",
    ),
    Quote(
        "Gratitude is a powerful catalyst for happiness. It's the spark that "
        "lights a fire of joy in your soul.",
        "Amy Collette",
    ),
    Quote("Count your blessings, not your problems.", "Roy T. Bennett"),
    Quote(
        "Gratitude is the fairest blossom which springs from the soul.",
        "Henry Ward Beecher",
    ),
    Quote("Every day is a gift. Be grateful for today.", "DailyGratitude"),
)

# Basic logging setup
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)

# Jinja2 template environment for HTML rendering
TEMPLATE_ENV = Environment(
    loader=DictLoader(
        {
            "entry_detail.html": dedent(
                """\
                <div style='font-family:"Segoe UI",sans-serif; line-height:1.6; color:{{ colors.text }};'>
                    <div style='display:flex; flex-wrap:wrap; gap:12px; align-items:flex-end; justify-content:space-between; margin-bottom:12px;'>
                        <div>
                            <div style='font-size:16px; font-weight:bold;'>{{ date_display }}</div>
                            <div style='color:{{ colors.secondary }};'>{{ datetime_display }}</div>
                        </div>
                        <div style='color:{{ colors.secondary }}; font-size:14px;'>
                            Mood: <strong style='color:{{ colors.text }};'>{{ mood_display }}</strong>
                        </div>
                    </div>
                    {% if tags %}
                    <div style='margin:8px 0; color:{{ colors.secondary }};'>
                        {% for tag in tags %}<span style='margin-right:8px;'>#{{ tag }}</span>{% endfor %}
                    </div>
                    {% endif %}
                    <hr style='border:0; height:1px; background:{{ colors.divider }}; margin:12px 0;'>
                    <p style='white-space:pre-wrap; margin:0;'>{{ body_text | e | replace('\\n', '<br>' | safe) }}</p>
                </div>
                """
            ),
            "quote.html": dedent(
                """\
                <div style='font-family:"Segoe UI",sans-serif; color:{{ colors.text }};'>
                    <p style='font-style:italic; margin:0 0 6px 0;'>&ldquo;{{ text }}&rdquo;</p>
                    <p style='margin:0; color:{{ colors.secondary }};'>&mdash; {{ author }}</p>
                </div>
                """
            ),
            "empty_history.html": dedent(
                """\
                <div style='font-family:"Segoe UI",sans-serif; color:{{ colors.secondary }};'>
                    No gratitude entries yet. Write your first one above.
                </div>
                """
            ),
        }
    ),
    autoescape=select_autoescape(["html", "xml"]),
    trim_blocks=True,
    lstrip_blocks=True,
)

ENTRY_DETAIL_TEMPLATE = TEMPLATE_ENV.get_template("entry_detail.html")
QUOTE_TEMPLATE = TEMPLATE_ENV.get_template("quote.html")
EMPTY_HISTORY_TEMPLATE = TEMPLATE_ENV.get_template("empty_history.html")
