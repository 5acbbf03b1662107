"""User interface components and event handling."""

from __future__ import annotations

import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable

from PySide6.QtCore import (
    QAbstractListModel,
    QModelIndex,
    QPersistentModelIndex,
    Qt,
    Slot,
)
from PySide6.QtGui import QCloseEvent, QColor, QFont, QPalette
from PySide6.QtWidgets import (
    QApplication,
    QComboBox,
    QFileDialog,
    QGraphicsDropShadowEffect,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListView,
    QMessageBox,
    QPushButton,
    QSplitter,
    QTextBrowser,
    QTextEdit,
    QVBoxLayout,
    QWidget,
)

from gratitude.constants import (
    ENTRY_CHARACTER_LIMIT,
    MOOD_CHOICES,
    RECENT_ENTRIES_LIMIT,
)
from gratitude.db_worker import FutureRelay
from gratitude.models import GratitudeEntry, JournalStats, Quote
from gratitude.service import GratitudeJournal
from gratitude.utils import (
    format_entry_datetime,
    format_header_date,
    format_stats,
    render_empty_history_html,
    render_entry_detail_html,
    render_quote_html,
)


class GratitudeEntryListModel(QAbstractListModel):
    """List model over gratitude entries; only visible rows are rendered."""

    def __init__(self, parent=None) -> None:
        super().__init__(parent)
        self._entries: list[GratitudeEntry] = []

    def rowCount(
        self, parent: QModelIndex | QPersistentModelIndex = QModelIndex()
    ) -> int:
        if parent.isValid():
            return 0
        return len(self._entries)

    def data(
        self,
        index: QModelIndex | QPersistentModelIndex,
        role: int = Qt.ItemDataRole.DisplayRole,
    ) -> Any:
        if not index.isValid() or index.row() >= len(self._entries):
            return None

        entry = self._entries[index.row()]

        if role == Qt.ItemDataRole.DisplayRole:
            preview = " ".join(entry.entry_text.strip().split())
            if len(preview) > 48:
                preview = preview[:47] + "…"

            header = f"[{format_entry_datetime(entry.created_datetime)}]"
            if entry.mood_rating is not None:
                header += f" Mood {entry.mood_rating}/5"

            display_lines = [header]
            tags = entry.tag_list()
            if tags:
                display_lines.append("  # " + ", ".join(tags))
            if preview:
                display_lines.append(f"  -> {preview}")
            return "\n".join(display_lines)

        elif role == Qt.ItemDataRole.UserRole:
            return entry

        return None

    def get_entry(self, index: QModelIndex) -> GratitudeEntry | None:
        if not index.isValid() or index.row() >= len(self._entries):
            return None
        return self._entries[index.row()]

    def set_entries(self, entries: list[GratitudeEntry]) -> None:
        self.beginResetModel()
        self._entries = list(entries)
        self.endResetModel()

    def clear(self) -> None:
        self.beginResetModel()
        self._entries = []
        self.endResetModel()


class GratitudeWindow(QWidget):
    """Main window: daily quote, entry editor and past entries."""

    def __init__(self, journal: GratitudeJournal) -> None:
        super().__init__()
        self.journal = journal
        self._export_target: Path | None = None
        self.setWindowTitle("Daily Gratitude")
        self.setObjectName("GratitudeWindow")
        self.setAutoFillBackground(True)
        self._apply_fluent_theme()

        self._relay = FutureRelay(self)
        self._relay.succeeded.connect(self._on_task_succeeded)
        self._relay.failed.connect(self._on_task_failed)
        self._result_handlers: dict[str, Callable[[Any], None]] = {
            "quote": self._on_quote_loaded,
            "save": self._on_entry_saved,
            "entries": self._on_entries_loaded,
            "stats": self._on_stats_loaded,
            "delete": self._on_entry_deleted,
            "export": self._on_export_finished,
        }

        layout = QVBoxLayout()
        layout.setContentsMargins(28, 28, 28, 24)
        layout.setSpacing(14)

        title = QLabel("Daily Gratitude")
        title.setObjectName("TitleLabel")
        layout.addWidget(title)

        self.date_label = QLabel(format_header_date(date.today()))
        self.date_label.setObjectName("SubtleLabel")
        layout.addWidget(self.date_label)

        self.stats_label = QLabel("Loading stats...")
        self.stats_label.setObjectName("SubtleLabel")
        layout.addWidget(self.stats_label)

        quote_card = QWidget()
        quote_card.setObjectName("QuoteCard")
        quote_row = QHBoxLayout()
        quote_row.setContentsMargins(16, 12, 16, 12)
        self.quote_label = QLabel("Loading quote...")
        self.quote_label.setWordWrap(True)
        self.quote_label.setTextFormat(Qt.TextFormat.RichText)
        quote_row.addWidget(self.quote_label, 1)
        self.refresh_quote_button = QPushButton("New Quote")
        self.refresh_quote_button.clicked.connect(self.load_random_quote)
        quote_row.addWidget(self.refresh_quote_button)
        quote_card.setLayout(quote_row)
        layout.addWidget(quote_card)
        self._apply_shadow(quote_card, blur_radius=26, y_offset=6)

        layout.addWidget(QLabel("What are you grateful for today?"))
        self.text_edit = QTextEdit()
        self.text_edit.setPlaceholderText("Today I'm grateful for...")
        self.text_edit.textChanged.connect(self.on_text_changed)
        layout.addWidget(self.text_edit)

        self.counter = QLabel(f"0 / {ENTRY_CHARACTER_LIMIT}")
        self.counter.setAlignment(Qt.AlignmentFlag.AlignRight)
        layout.addWidget(self.counter)

        details_row = QHBoxLayout()
        details_row.addWidget(QLabel("Mood:"))
        self.mood_selector = QComboBox()
        for label, value in MOOD_CHOICES:
            self.mood_selector.addItem(label, userData=value)
        details_row.addWidget(self.mood_selector)
        details_row.addWidget(QLabel("Tags:"))
        self.tags_input = QLineEdit()
        self.tags_input.setPlaceholderText("family, health, work")
        details_row.addWidget(self.tags_input, 1)
        layout.addLayout(details_row)

        button_row = QHBoxLayout()
        self.save_button = QPushButton("Save Entry")
        self.save_button.clicked.connect(self.archive_entry)
        button_row.addWidget(self.save_button)
        self.export_button = QPushButton("Export to CSV")
        self.export_button.clicked.connect(self.export_journal)
        button_row.addWidget(self.export_button)
        button_row.addStretch()
        self.status_label = QLabel("")
        self.status_label.setObjectName("SubtleLabel")
        button_row.addWidget(self.status_label)
        layout.addLayout(button_row)

        history_header = QHBoxLayout()
        history_header.addWidget(QLabel("Past Entries:"))
        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("Search entries")
        self.search_input.returnPressed.connect(self.refresh_history)
        history_header.addWidget(self.search_input, 1)
        self.today_button = QPushButton("Today")
        self.today_button.setCheckable(True)
        self.today_button.toggled.connect(self.refresh_history)
        history_header.addWidget(self.today_button)
        self.delete_button = QPushButton("Delete")
        self.delete_button.setEnabled(False)
        self.delete_button.clicked.connect(self.delete_selected_entry)
        history_header.addWidget(self.delete_button)
        layout.addLayout(history_header)

        self.history_splitter = QSplitter(Qt.Orientation.Horizontal)
        self.history_list_model = GratitudeEntryListModel(self)
        self.history_list = QListView()
        self.history_list.setObjectName("HistoryListView")
        self.history_list.setModel(self.history_list_model)
        self.history_list.setSelectionMode(QListView.SelectionMode.SingleSelection)
        self.history_list.setVerticalScrollMode(QListView.ScrollMode.ScrollPerPixel)
        self.history_list.selectionModel().currentChanged.connect(
            self.on_history_selection_changed
        )
        self.history_splitter.addWidget(self.history_list)

        self.history_content = QTextBrowser()
        self.history_content.setObjectName("HistoryDetailView")
        self.history_content.setOpenExternalLinks(False)
        self.history_content.setReadOnly(True)
        self.history_splitter.addWidget(self.history_content)
        self.history_splitter.setMinimumHeight(160)
        self.history_splitter.setStretchFactor(0, 1)
        self.history_splitter.setStretchFactor(1, 2)
        layout.addWidget(self.history_splitter)

        self.setLayout(layout)

        self.load_daily_quote()
        self.refresh_stats()
        self.refresh_history()

    def _apply_shadow(
        self, target: QWidget, *, blur_radius: int = 24, y_offset: int = 6
    ) -> None:
        """Apply a soft drop shadow to match Fluent cards."""
        if target.graphicsEffect() is not None:
            return
        shadow = QGraphicsDropShadowEffect(target)
        shadow.setBlurRadius(blur_radius)
        shadow.setOffset(0, y_offset)
        shadow.setColor(QColor(0, 0, 0, 45))
        target.setGraphicsEffect(shadow)

    def _apply_fluent_theme(self) -> None:
        """Configure palette and styles to approximate Fluent Design."""
        app = QApplication.instance()
        QApplication.setStyle("Fusion")

        accent_color = QColor(46, 139, 87)
        foreground = QColor(32, 31, 30)
        neutral_window = QColor(245, 245, 245)
        neutral_base = QColor(255, 255, 255)

        palette = QPalette()
        palette.setColor(QPalette.ColorRole.Window, neutral_window)
        palette.setColor(QPalette.ColorRole.Base, neutral_base)
        palette.setColor(QPalette.ColorRole.Text, foreground)
        palette.setColor(QPalette.ColorRole.WindowText, foreground)
        palette.setColor(QPalette.ColorRole.ButtonText, foreground)
        palette.setColor(QPalette.ColorRole.Highlight, accent_color)

        if app is not None and isinstance(app, QApplication):
            app.setPalette(palette)

        self.setPalette(palette)
        self.setFont(QFont("Segoe UI", 10))

        accent_hex = accent_color.name()
        self.setStyleSheet(
            f"""
            QWidget#GratitudeWindow {{
                background-color: {neutral_window.name()};
            }}
            QLabel#TitleLabel {{
                font-size: 22pt;
                font-weight: bold;
                color: {accent_hex};
            }}
            QLabel#SubtleLabel {{
                color: #666666;
            }}
            QWidget#QuoteCard {{
                background-color: white;
                border-radius: 10px;
            }}
            QLineEdit, QTextEdit, QTextBrowser, QComboBox {{
                background-color: white;
                border: 1px solid rgba(32, 31, 30, 40);
                border-radius: 10px;
                padding: 6px 10px;
            }}
            QLineEdit:focus, QTextEdit:focus {{
                border: 2px solid {accent_hex};
            }}
            QListView#HistoryListView::item:selected {{
                background-color: {accent_hex};
                color: white;
            }}
            QPushButton {{
                background-color: {accent_hex};
                border: none;
                border-radius: 8px;
                padding: 8px 16px;
                font-weight: 600;
                color: white;
            }}
            QPushButton:disabled {{
                background-color: #a5c9b4;
            }}
        """
        )

    def is_dark_theme(self) -> bool:
        palette = self.history_content.palette()
        return palette.color(QPalette.ColorRole.Base).lightnessF() < 0.5

    # ---- actions ----
    def _run(self, tag: str, fn: Callable[..., Any], *args: Any) -> None:
        try:
            future = self.journal.submit(fn, *args)
        except RuntimeError:
            logging.warning("Ignoring %s request; journal is closing", tag)
            return
        self._relay.watch(tag, future)

    def load_daily_quote(self) -> None:
        self._run("quote", self.journal.get_daily_quote)

    def load_random_quote(self) -> None:
        self.refresh_quote_button.setEnabled(False)
        self._run("quote", self.journal.get_random_quote)

    def refresh_stats(self) -> None:
        self._run("stats", self.journal.get_stats)

    def refresh_history(self) -> None:
        """Reload the history list: today's entries, a search, or the latest."""
        if self.today_button.isChecked():
            self._run("entries", self.journal.get_entries_for_date, date.today())
            return
        term = self.search_input.text().strip()
        if term:
            self._run("entries", self.journal.search_entries, term)
        else:
            self._run("entries", self.journal.get_recent_entries, RECENT_ENTRIES_LIMIT)

    def on_text_changed(self) -> None:
        length = len(self.text_edit.toPlainText())
        self.counter.setText(f"{length} / {ENTRY_CHARACTER_LIMIT}")

    def archive_entry(self) -> None:
        """Save the current entry in the background."""
        text = self.text_edit.toPlainText().strip()
        if not text:
            QMessageBox.warning(
                self, "Empty Entry", "Please write something you're grateful for!"
            )
            return
        if len(text) > ENTRY_CHARACTER_LIMIT:
            QMessageBox.warning(
                self,
                "Entry Too Long",
                f"Entries are limited to {ENTRY_CHARACTER_LIMIT} characters.",
            )
            return

        self.save_button.setEnabled(False)
        self._run(
            "save",
            self.journal.save_entry,
            text,
            self.mood_selector.currentData(),
            self.tags_input.text(),
        )

    def delete_selected_entry(self) -> None:
        entry = self.history_list_model.get_entry(self.history_list.currentIndex())
        if entry is None:
            return
        answer = QMessageBox.question(
            self, "Delete Entry", f"Delete this entry?\n\n{entry.preview(80)}"
        )
        if answer != QMessageBox.StandardButton.Yes:
            return
        self._run("delete", self.journal.delete_entry, entry.id)

    def export_journal(self) -> None:
        """Export gratitude entries to a CSV file."""
        suggested_name = (
            f"gratitude-export-{datetime.now().strftime('%Y%m%d-%H%M%S')}.csv"
        )
        target_path_str, _ = QFileDialog.getSaveFileName(
            self,
            "Export Journal to CSV",
            str(Path.home() / suggested_name),
            "CSV Files (*.csv);;All Files (*)",
        )
        if not target_path_str:
            return

        self.export_to(Path(target_path_str))

    def export_to(self, target_path: Path) -> None:
        self.export_button.setEnabled(False)
        self.status_label.setText("Exporting...")
        self._export_target = target_path
        self._run("export", self.journal.export_entries, target_path)

    def closeEvent(self, event: QCloseEvent) -> None:
        # journal.close() blocks until in-flight work finishes
        self.hide()
        self.journal.close()
        super().closeEvent(event)

    # ---- background task callbacks ----
    @Slot(str, object)
    def _on_task_succeeded(self, tag: str, result: object) -> None:
        handler = self._result_handlers.get(tag)
        if handler is not None:
            handler(result)

    @Slot(str, str)
    def _on_task_failed(self, tag: str, message: str) -> None:
        if tag == "save":
            self.save_button.setEnabled(True)
            QMessageBox.critical(self, "Save Failed", f"Could not save entry: {message}")
        elif tag == "quote":
            self.refresh_quote_button.setEnabled(True)
        elif tag == "stats":
            self.stats_label.setText("Stats unavailable")
        elif tag == "export":
            self.export_button.setEnabled(True)
            self.status_label.setText("Export failed")
            QMessageBox.critical(self, "Export Failed", f"Could not export journal: {message}")
        else:
            QMessageBox.critical(self, "Journal Error", message)

    def _on_quote_loaded(self, quote: Quote) -> None:
        self.quote_label.setText(render_quote_html(quote, self.is_dark_theme()))
        self.refresh_quote_button.setEnabled(True)

    def _on_entry_saved(self, entry_id: int) -> None:
        self.save_button.setEnabled(True)
        self.text_edit.clear()
        self.tags_input.clear()
        self.mood_selector.setCurrentIndex(0)
        self.refresh_stats()
        self.refresh_history()

    def _on_entry_deleted(self, removed: bool) -> None:
        if not removed:
            QMessageBox.information(self, "Delete Entry", "That entry no longer exists.")
        self.refresh_stats()
        self.refresh_history()

    def _on_export_finished(self, exported_rows: int) -> None:
        self.export_button.setEnabled(True)
        target = self._export_target.resolve() if self._export_target else ""
        self.status_label.setText(f"Exported {exported_rows} entries to {target}")

    def _on_stats_loaded(self, stats: JournalStats) -> None:
        self.stats_label.setText(format_stats(stats.total, stats.today))

    def _on_entries_loaded(self, entries: list[GratitudeEntry]) -> None:
        if not entries:
            self.history_list_model.clear()
            self.delete_button.setEnabled(False)
            self.history_content.setHtml(render_empty_history_html(self.is_dark_theme()))
            return

        self.history_list_model.set_entries(entries)
        self.history_list.setCurrentIndex(self.history_list_model.index(0, 0))

    def on_history_selection_changed(
        self, current: QModelIndex, previous: QModelIndex
    ) -> None:
        entry = self.history_list_model.get_entry(current)
        self.delete_button.setEnabled(entry is not None)
        if entry is None:
            self.history_content.setHtml(render_empty_history_html(self.is_dark_theme()))
            return
        self.history_content.setHtml(render_entry_detail_html(entry, self.is_dark_theme()))
