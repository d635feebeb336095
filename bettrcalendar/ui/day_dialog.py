from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QFrame, QScrollArea, QCheckBox, QWidget
)
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont

from bettrcalendar.core.config import (
    FONT_HEADER, FONT_HEADER_SIZE, FONT_LABEL, FONT_LABEL_SIZE, FONT_SMALL, FONT_SMALL_SIZE,
    DAY_DIALOG_WIDTH, DAY_DIALOG_HEIGHT, MAIN_STYLE, DONE_COLOR
)
from bettrcalendar.core.utils import format_datetime, parse_iso_from_api


def event_time_text(event):
    if event.is_all_day:
        return "All day"
    if event.effective_start is None:
        return ""
    text = format_datetime(event.effective_start.instant.astimezone(), 'time')
    end = event.end.get('dateTime')
    if end:
        text += "-" + format_datetime(parse_iso_from_api(end).astimezone(), 'time')
    return text


class DayDialog(QDialog):
    """Every event of one day, with a done checkbox per event."""
    def __init__(self, parent=None, on_toggle=None, on_close=None):
        super().__init__(parent)
        self.on_toggle = on_toggle
        self.on_close = on_close

        self.setWindowTitle("Day Events")
        self.setModal(False)
        self.setFixedSize(DAY_DIALOG_WIDTH, DAY_DIALOG_HEIGHT)
        self.setStyleSheet(MAIN_STYLE)

        main_layout = QVBoxLayout(self)

        self.header_label = QLabel("")
        self.header_label.setFont(QFont(FONT_HEADER, FONT_HEADER_SIZE, QFont.Weight.Bold))
        self.header_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        main_layout.addWidget(self.header_label)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        self.list_widget = QWidget()
        self.list_layout = QVBoxLayout(self.list_widget)
        self.list_layout.setAlignment(Qt.AlignmentFlag.AlignTop)
        scroll.setWidget(self.list_widget)
        main_layout.addWidget(scroll, 1)

        close_btn = QPushButton("Close")
        close_btn.clicked.connect(self.reject)
        main_layout.addWidget(close_btn)

    def show_day(self, day, events, is_done):
        """Rebuild the list for a day."""
        self.header_label.setText(f"Events for {format_datetime(day, 'long_date')}")

        while self.list_layout.count():
            item = self.list_layout.takeAt(0)
            if item.widget():
                item.widget().deleteLater()

        if not events:
            empty_label = QLabel("No events for this day.")
            empty_label.setStyleSheet(f"color: {DONE_COLOR}; font-style: italic;")
            self.list_layout.addWidget(empty_label)

        for event in events:
            self.list_layout.addWidget(self._event_row(event, is_done(event.id)))

    def _event_row(self, event, done):
        row = QFrame()
        row_layout = QHBoxLayout(row)
        row_layout.setContentsMargins(0, 2, 0, 2)

        checkbox = QCheckBox()
        checkbox.setChecked(done)
        checkbox.toggled.connect(lambda _checked, event_id=event.id: self.on_toggle and self.on_toggle(event_id))
        row_layout.addWidget(checkbox)

        title_label = QLabel(event.title or "(No title)")
        title_label.setFont(QFont(FONT_LABEL, FONT_LABEL_SIZE))
        if done:
            title_label.setStyleSheet(f"color: {DONE_COLOR}; text-decoration: line-through;")
        row_layout.addWidget(title_label, 1)

        time_label = QLabel(event_time_text(event))
        time_label.setFont(QFont(FONT_SMALL, FONT_SMALL_SIZE))
        row_layout.addWidget(time_label)
        return row

    def reject(self):
        if self.on_close:
            self.on_close()
        super().reject()
