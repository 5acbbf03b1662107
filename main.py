"""Main entry point for the Daily Gratitude application."""

from __future__ import annotations

import logging
import sqlite3
import sys

from PySide6.QtWidgets import QApplication

from gratitude.constants import DATABASE_PATH
from gratitude.quotes import QuoteService
from gratitude.service import GratitudeJournal
from gratitude.storage import EntryStore
from gratitude.ui import GratitudeWindow


def main() -> int:
    """Initialize the database and launch the application."""
    journal = GratitudeJournal(EntryStore(DATABASE_PATH), QuoteService())
    try:
        journal.initialize()
    except (sqlite3.Error, OSError):
        logging.exception("Daily Gratitude cannot start without its database.")
        journal.close()
        return 1

    app = QApplication(sys.argv)
    app.aboutToQuit.connect(journal.close)
    window = GratitudeWindow(journal)
    window.resize(1000, 750)
    window.show()
    return int(app.exec())


if __name__ == "__main__":
    sys.exit(main())
