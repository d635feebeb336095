from datetime import datetime, timedelta
from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit, QTextEdit,
    QPushButton, QFrame, QDateEdit, QComboBox, QSpinBox, QGridLayout, QCheckBox
)
from PyQt6.QtCore import Qt, QDate
from PyQt6.QtGui import QFont

from bettrcalendar.core.utils import convert_to_24, convert_from_24
from bettrcalendar.core.config import (
    FONT_HEADER, FONT_HEADER_SIZE, FONT_LABEL, FONT_LABEL_SIZE, FONT_SMALL, FONT_SMALL_SIZE,
    DEFAULT_DIALOG_WIDTH, DEFAULT_DIALOG_HEIGHT, MAIN_STYLE, ERROR_COLOR
)
from bettrcalendar.core.models import EventDraft


class TimeInput(QFrame):
    """Hour, minute and AM/PM selectors producing an HH:MM string."""
    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.hour = QSpinBox()
        self.hour.setRange(1, 12)
        self.hour.setFixedWidth(60)
        layout.addWidget(self.hour)

        layout.addWidget(QLabel(":"))

        self.minute = QSpinBox()
        self.minute.setRange(0, 59)
        self.minute.setSingleStep(5)
        self.minute.setFixedWidth(60)
        layout.addWidget(self.minute)

        self.period = QComboBox()
        self.period.addItems(["AM", "PM"])
        layout.addWidget(self.period)

    def set_hour_24(self, hour_24, minute):
        hour_12, period = convert_from_24(str(hour_24))
        self.hour.setValue(hour_12)
        self.minute.setValue(minute)
        self.period.setCurrentText(period)

    def hour_24(self):
        return convert_to_24(str(self.hour.value()), self.period.currentText())

    def text(self):
        return f"{self.hour_24():02d}:{self.minute.value():02d}"


class AddEventDialog(QDialog):
    """Non-modal form for creating a new event."""
    def __init__(self, parent=None, on_confirm=None, on_cancel=None):
        super().__init__(parent)
        self.on_confirm = on_confirm
        self.on_cancel = on_cancel

        self.setWindowTitle("Add Event")
        self.setModal(False)
        self.setFixedSize(DEFAULT_DIALOG_WIDTH, DEFAULT_DIALOG_HEIGHT)
        self.setStyleSheet(MAIN_STYLE)

        if parent:
            parent_rect = parent.geometry()
            x = parent_rect.x() + (parent_rect.width() - DEFAULT_DIALOG_WIDTH) // 2
            y = parent_rect.y() + (parent_rect.height() - DEFAULT_DIALOG_HEIGHT) // 2
            self.setGeometry(x, y, DEFAULT_DIALOG_WIDTH, DEFAULT_DIALOG_HEIGHT)

        self.init_ui()
        self.reset()

    def _label(self, text):
        label = QLabel(text)
        label.setFont(QFont(FONT_LABEL, FONT_LABEL_SIZE))
        return label

    def init_ui(self):
        """Create and arrange all dialog widgets."""
        main_layout = QVBoxLayout(self)
        main_layout.setSpacing(6)

        header_label = QLabel("Add New Event")
        header_font = QFont(FONT_HEADER, FONT_HEADER_SIZE)
        header_font.setBold(True)
        header_label.setFont(header_font)
        header_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        main_layout.addWidget(header_label)

        main_layout.addWidget(self._label("Title"))
        self.title_edit = QLineEdit()
        main_layout.addWidget(self.title_edit)

        main_layout.addWidget(self._label("Description"))
        self.description_edit = QTextEdit()
        self.description_edit.setFixedHeight(60)
        main_layout.addWidget(self.description_edit)

        main_layout.addWidget(self._label("Location"))
        self.location_edit = QLineEdit()
        main_layout.addWidget(self.location_edit)

        self.all_day_check = QCheckBox("All Day")
        self.all_day_check.toggled.connect(self.update_time_visibility)
        main_layout.addWidget(self.all_day_check)

        time_frame = QFrame()
        time_layout = QGridLayout(time_frame)
        time_layout.setContentsMargins(0, 0, 0, 0)
        time_layout.setSpacing(5)

        time_layout.addWidget(self._label("Start:"), 0, 0)
        self.start_date = QDateEdit()
        self.start_date.setCalendarPopup(True)
        self.start_date.setDisplayFormat("yyyy-MM-dd")
        self.start_date.dateChanged.connect(self.update_end_date)
        time_layout.addWidget(self.start_date, 0, 1)
        self.start_time = TimeInput()
        self.start_time.hour.valueChanged.connect(self.update_end_time)
        self.start_time.minute.valueChanged.connect(self.update_end_time)
        self.start_time.period.currentTextChanged.connect(self.update_end_time)
        time_layout.addWidget(self.start_time, 0, 2)

        time_layout.addWidget(self._label("End:"), 1, 0)
        self.end_date = QDateEdit()
        self.end_date.setCalendarPopup(True)
        self.end_date.setDisplayFormat("yyyy-MM-dd")
        time_layout.addWidget(self.end_date, 1, 1)
        self.end_time = TimeInput()
        time_layout.addWidget(self.end_time, 1, 2)

        main_layout.addWidget(time_frame)

        main_layout.addWidget(self._label("Guests (comma separated emails)"))
        self.guests_edit = QLineEdit()
        self.guests_edit.setPlaceholderText("guest1@email.com, guest2@email.com")
        main_layout.addWidget(self.guests_edit)

        main_layout.addWidget(self._label("Recurrence (RRULE)"))
        self.recurrence_edit = QLineEdit()
        self.recurrence_edit.setPlaceholderText("e.g. RRULE:FREQ=WEEKLY;COUNT=10")
        main_layout.addWidget(self.recurrence_edit)

        main_layout.addWidget(self._label("Color ID"))
        self.color_edit = QLineEdit()
        self.color_edit.setPlaceholderText("Optional")
        main_layout.addWidget(self.color_edit)

        self.error_label = QLabel("")
        self.error_label.setWordWrap(True)
        self.error_label.setFont(QFont(FONT_SMALL, FONT_SMALL_SIZE))
        self.error_label.setStyleSheet(f"color: {ERROR_COLOR};")
        self.error_label.hide()
        main_layout.addWidget(self.error_label)

        button_layout = QHBoxLayout()
        button_layout.addStretch(1)

        self.cancel_btn = QPushButton("Cancel")
        self.cancel_btn.clicked.connect(self.reject)
        button_layout.addWidget(self.cancel_btn)

        self.confirm_btn = QPushButton("Add Event")
        self.confirm_btn.clicked.connect(self.confirm)
        button_layout.addWidget(self.confirm_btn)

        main_layout.addLayout(button_layout)

    def reset(self):
        """Clear every field and start at the next full hour."""
        next_hour = datetime.now().replace(minute=0, second=0, microsecond=0) + timedelta(hours=1)
        day = QDate(next_hour.year, next_hour.month, next_hour.day)

        self.title_edit.clear()
        self.description_edit.clear()
        self.location_edit.clear()
        self.all_day_check.setChecked(False)
        self.start_date.setDate(day)
        self.end_date.setDate(day)
        self.start_time.set_hour_24(next_hour.hour, 0)
        self.update_end_time()
        self.guests_edit.clear()
        self.recurrence_edit.clear()
        self.color_edit.clear()
        self.set_error(None)
        self.set_pending(False)

    def update_time_visibility(self, all_day):
        self.start_time.setVisible(not all_day)
        self.end_time.setVisible(not all_day)

    def update_end_date(self, new_date):
        """Keep the end date from falling before the start date."""
        if self.end_date.date() < new_date:
            self.end_date.setDate(new_date)

    def update_end_time(self):
        """Update end time to be 1 hour after start time."""
        end_hour_24 = (self.start_time.hour_24() + 1) % 24
        self.end_time.set_hour_24(end_hour_24, self.start_time.minute.value())

    def set_error(self, message):
        self.error_label.setText(message or "")
        self.error_label.setVisible(bool(message))

    def set_pending(self, pending):
        self.confirm_btn.setEnabled(not pending)
        self.cancel_btn.setEnabled(not pending)
        self.confirm_btn.setText("Adding..." if pending else "Add Event")

    def draft(self):
        """Collect the form into an EventDraft."""
        all_day = self.all_day_check.isChecked()
        return EventDraft(
            title=self.title_edit.text().strip(),
            description=self.description_edit.toPlainText(),
            location=self.location_edit.text(),
            all_day=all_day,
            start_date=self.start_date.date().toString("yyyy-MM-dd"),
            start_time='' if all_day else self.start_time.text(),
            end_date=self.end_date.date().toString("yyyy-MM-dd"),
            end_time='' if all_day else self.end_time.text(),
            guests=self.guests_edit.text().strip(),
            recurrence=self.recurrence_edit.text().strip(),
            color=self.color_edit.text().strip(),
        )

    def confirm(self):
        """Hand the draft over; the window closes the dialog once it is saved."""
        if self.on_confirm:
            self.on_confirm(self.draft())

    def reject(self):
        if self.on_cancel:
            self.on_cancel()
        super().reject()
