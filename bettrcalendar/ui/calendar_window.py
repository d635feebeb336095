import logging
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton, QFrame,
    QScrollArea, QStackedWidget, QGridLayout, QCheckBox, QButtonGroup
)
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont
from bettrcalendar.core.config import (
    DEFAULT_WINDOW_SIZE, MAIN_STYLE, BACKGROUND_COLOR, HIGHLIGHT_COLOR, CARD_COLOR,
    NAV_BG_COLOR, DONE_COLOR, ERROR_COLOR, FONT_HEADER, FONT_HEADER_SIZE, FONT_LABEL,
    FONT_LABEL_SIZE, FONT_SMALL, FONT_SMALL_SIZE, FONT_DAY, FONT_DAY_SIZE, PADDING,
    WEEKDAY_NAMES, ZOOM_DAILY, ZOOM_WEEKLY, ZOOM_MONTHLY
)
from bettrcalendar.core.controller import LOADING, ERROR
from bettrcalendar.ui.day_dialog import DayDialog, event_time_text
from bettrcalendar.ui.event_dialog import AddEventDialog

logger = logging.getLogger(__name__)

LANDING_PAGE, LOADING_PAGE, ERROR_PAGE, CALENDAR_PAGE = range(4)


class CalendarApp(QMainWindow):
    """Main application window."""
    def __init__(self, auth_manager, controller, worker):
        super().__init__()
        self.auth_manager = auth_manager
        self.controller = controller
        self.worker = worker

        self.setWindowTitle("BettrCalendar")
        self.resize(*DEFAULT_WINDOW_SIZE)
        self.setStyleSheet(MAIN_STYLE)

        self.init_ui()

        self.day_dialog = DayDialog(self, on_toggle=self.controller.toggle_done,
                                    on_close=self.controller.close_day_detail)
        self.add_event_dialog = AddEventDialog(self, on_confirm=self.controller.submit_draft,
                                               on_cancel=self.controller.close_add_event)
        self.form_resets_seen = self.controller.form_resets

        self.worker.taskCompleted.connect(self.controller.on_task_completed)
        self.worker.taskError.connect(self.controller.on_task_error)
        self.worker.loadingChanged.connect(self.on_loading_changed)
        self.controller.subscribe(self.render)

    def start(self):
        """Show the calendar if a sign-in is stored, otherwise the landing page."""
        if self.auth_manager.has_session():
            self.controller.mount()
        else:
            self.pages.setCurrentIndex(LANDING_PAGE)

    def init_ui(self):
        """Initialize the main UI components."""
        self.pages = QStackedWidget()
        self.setCentralWidget(self.pages)

        self.pages.addWidget(self.init_landing_page())
        self.pages.addWidget(self.init_loading_page())
        self.pages.addWidget(self.init_error_page())
        self.pages.addWidget(self.init_calendar_page())

    def init_landing_page(self):
        page = QWidget()
        layout = QVBoxLayout(page)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        title_label = QLabel("Welcome to BettrCalendar")
        title_label.setFont(QFont(FONT_HEADER, FONT_HEADER_SIZE + 8, QFont.Weight.Bold))
        title_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(title_label)

        subtitle_label = QLabel("Your smarter way to manage time and boost productivity")
        subtitle_label.setFont(QFont(FONT_LABEL, FONT_LABEL_SIZE))
        subtitle_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(subtitle_label)

        sign_in_btn = QPushButton("Sign in with Google")
        sign_in_btn.setFixedWidth(240)
        sign_in_btn.clicked.connect(self.sign_in)
        layout.addWidget(sign_in_btn, alignment=Qt.AlignmentFlag.AlignCenter)

        self.landing_error_label = QLabel("")
        self.landing_error_label.setStyleSheet(f"color: {ERROR_COLOR};")
        self.landing_error_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.landing_error_label)
        return page

    def init_loading_page(self):
        page = QWidget()
        layout = QVBoxLayout(page)
        loading_label = QLabel("Loading calendar...")
        loading_label.setFont(QFont(FONT_HEADER, FONT_HEADER_SIZE))
        loading_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(loading_label)
        return page

    def init_error_page(self):
        page = QWidget()
        layout = QVBoxLayout(page)
        layout.setAlignment(Qt.AlignmentFlag.AlignCenter)

        header_label = QLabel("Error Loading Calendar")
        header_label.setFont(QFont(FONT_HEADER, FONT_HEADER_SIZE, QFont.Weight.Bold))
        header_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(header_label)

        self.error_message_label = QLabel("")
        self.error_message_label.setFont(QFont(FONT_LABEL, FONT_LABEL_SIZE))
        self.error_message_label.setWordWrap(True)
        self.error_message_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.error_message_label)

        button_layout = QHBoxLayout()
        retry_btn = QPushButton("Retry")
        retry_btn.clicked.connect(self.controller.retry)
        button_layout.addWidget(retry_btn)
        sign_out_btn = QPushButton("Sign out")
        sign_out_btn.clicked.connect(self.sign_out)
        button_layout.addWidget(sign_out_btn)
        layout.addLayout(button_layout)
        return page

    def init_calendar_page(self):
        page = QWidget()
        layout = QVBoxLayout(page)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self.init_navbar(layout)

        self.grid_container = QFrame()
        self.grid_container.setStyleSheet(f"background-color: {BACKGROUND_COLOR};")
        self.grid_layout = QGridLayout(self.grid_container)
        self.grid_layout.setSpacing(1)
        layout.addWidget(self.grid_container, 1)
        return page

    def init_navbar(self, parent_layout):
        """Initialize the navigation bar."""
        navbar = QFrame()
        navbar.setStyleSheet(f"background-color: {NAV_BG_COLOR};")
        navbar.setMinimumHeight(60)

        nav_layout = QHBoxLayout(navbar)
        nav_layout.setContentsMargins(PADDING, PADDING, PADDING, PADDING)
        nav_layout.setSpacing(PADDING)

        prev_button = QPushButton("<")
        prev_button.setFixedWidth(40)
        prev_button.clicked.connect(self.controller.go_prev)
        nav_layout.addWidget(prev_button)

        self.title_label = QLabel("")
        self.title_label.setFont(QFont(FONT_HEADER, FONT_HEADER_SIZE, QFont.Weight.Bold))
        self.title_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        nav_layout.addWidget(self.title_label, 1)

        next_button = QPushButton(">")
        next_button.setFixedWidth(40)
        next_button.clicked.connect(self.controller.go_next)
        nav_layout.addWidget(next_button)

        today_button = QPushButton("Today")
        today_button.clicked.connect(self.controller.go_today)
        nav_layout.addWidget(today_button)

        self.zoom_buttons = {}
        zoom_group = QButtonGroup(self)
        zoom_group.setExclusive(True)
        for zoom, text in ((ZOOM_DAILY, "Daily"), (ZOOM_WEEKLY, "Weekly"), (ZOOM_MONTHLY, "Monthly")):
            button = QPushButton(text)
            button.setCheckable(True)
            button.clicked.connect(lambda _checked, z=zoom: self.controller.set_zoom(z))
            zoom_group.addButton(button)
            nav_layout.addWidget(button)
            self.zoom_buttons[zoom] = button

        add_button = QPushButton("+ Add Event")
        add_button.setFont(QFont(FONT_LABEL, FONT_LABEL_SIZE))
        add_button.clicked.connect(self.controller.open_add_event)
        nav_layout.addWidget(add_button)

        sign_out_button = QPushButton("Sign out")
        sign_out_button.clicked.connect(self.sign_out)
        nav_layout.addWidget(sign_out_button)

        parent_layout.addWidget(navbar)

    def sign_in(self):
        """Run the Google consent flow, then load the calendar."""
        self.landing_error_label.setText("")
        try:
            self.auth_manager.sign_in()
        except Exception as e:
            logger.error("Sign in failed: %s", e)
            self.landing_error_label.setText(f"Sign in failed: {e}")
            return

        if not self.controller.mount():
            self.controller.retry()

    def sign_out(self):
        self.auth_manager.sign_out()
        self.day_dialog.hide()
        self.add_event_dialog.hide()
        self.controller.sign_out()
        self.pages.setCurrentIndex(LANDING_PAGE)

    def on_loading_changed(self, is_loading):
        """Handle loading state changes."""
        if is_loading:
            self.statusBar().showMessage("Syncing with Google Calendar...")
        else:
            self.statusBar().clearMessage()

    def render(self, controller):
        """Bring every widget in line with the controller state."""
        if controller.needs_sign_in:
            self.pages.setCurrentIndex(LANDING_PAGE)
            return

        if controller.state == LOADING:
            self.pages.setCurrentIndex(LOADING_PAGE)
        elif controller.state == ERROR:
            self.error_message_label.setText(controller.error_message)
            self.pages.setCurrentIndex(ERROR_PAGE)
        else:
            self.title_label.setText(controller.title())
            self.zoom_buttons[controller.zoom].setChecked(True)
            self.build_grid(controller)
            self.pages.setCurrentIndex(CALENDAR_PAGE)

        self.sync_dialogs(controller)

    def sync_dialogs(self, controller):
        if controller.day_detail_open:
            self.day_dialog.show_day(controller.day_detail_date, controller.day_detail_events(),
                                     controller.is_done)
            if not self.day_dialog.isVisible():
                self.day_dialog.show()
        elif self.day_dialog.isVisible():
            self.day_dialog.hide()

        if self.form_resets_seen != controller.form_resets:
            self.form_resets_seen = controller.form_resets
            self.add_event_dialog.reset()
        self.add_event_dialog.set_pending(controller.add_event_pending)
        self.add_event_dialog.set_error(controller.add_event_error)
        if controller.add_event_open and not self.add_event_dialog.isVisible():
            self.add_event_dialog.show()
        elif not controller.add_event_open and self.add_event_dialog.isVisible():
            self.add_event_dialog.hide()

    def clear_widget(self, widget):
        """Clear all child widgets from a container."""
        layout = widget.layout()
        if layout is None:
            return
        while layout.count():
            item = layout.takeAt(0)
            if item.widget():
                item.widget().deleteLater()

    def build_grid(self, controller):
        """Lay out the cells of the current window."""
        self.clear_widget(self.grid_container)
        cells = controller.cells()
        if controller.zoom == ZOOM_DAILY:
            columns, stretched_rows = 1, {0}
        else:
            columns, stretched_rows = 7, set(range(1, 1 + (len(cells) + 6) // 7))
        for col in range(7):
            self.grid_layout.setColumnStretch(col, 1 if col < columns else 0)
        for row in range(8):
            self.grid_layout.setRowStretch(row, 1 if row in stretched_rows else 0)

        if controller.zoom == ZOOM_DAILY:
            self.grid_layout.addWidget(self.create_daily_cell(controller, cells[0]), 0, 0)
            return

        for col, day_name in enumerate(WEEKDAY_NAMES):
            label = QLabel(day_name)
            label.setFont(QFont(FONT_DAY, FONT_DAY_SIZE, QFont.Weight.Bold))
            label.setAlignment(Qt.AlignmentFlag.AlignCenter)
            label.setStyleSheet("background-color: #1A1A2E;")
            label.setFixedHeight(25)
            self.grid_layout.addWidget(label, 0, col)

        for index, cell in enumerate(cells):
            row, col = divmod(index, 7)
            self.grid_layout.addWidget(self.create_calendar_cell(controller, cell), row + 1, col)

    def create_calendar_cell(self, controller, cell):
        """Create a single calendar cell; padding cells stay empty and inert."""
        frame = QFrame()
        frame.setMinimumSize(140, 110)
        if cell.is_padding:
            frame.setStyleSheet(f"background-color: {BACKGROUND_COLOR}; border: none;")
            return frame

        if cell.is_today:
            frame.setStyleSheet(f"background-color: #2D2D4D; border: 2px solid {HIGHLIGHT_COLOR};")
        else:
            frame.setStyleSheet(f"background-color: {BACKGROUND_COLOR}; border: 1px solid #333344;")

        cell_layout = QVBoxLayout(frame)
        cell_layout.setContentsMargins(4, 2, 4, 2)
        cell_layout.setSpacing(1)

        day_label = QLabel(str(cell.date.day))
        day_label.setFont(QFont(FONT_LABEL, FONT_LABEL_SIZE))
        day_label.setAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignTop)
        day_label.setStyleSheet("border: none;")
        cell_layout.addWidget(day_label)

        for event in cell.visible:
            cell_layout.addWidget(self.create_event_label(event, controller.is_done(event.id)))

        if cell.hidden_count:
            more_label = QLabel(f"+{cell.hidden_count} more")
            more_label.setStyleSheet("color: #CCCCFF; background: transparent; border: none;")
            more_label.setFont(QFont(FONT_SMALL, FONT_SMALL_SIZE - 2))
            more_label.setAlignment(Qt.AlignmentFlag.AlignRight)
            more_label.mousePressEvent = lambda e, d=cell.date: self.controller.open_day(d)
            cell_layout.addWidget(more_label)

        cell_layout.addStretch(1)
        frame.mousePressEvent = lambda e, d=cell.date: self.controller.open_day(d)
        return frame

    def create_event_label(self, event, done):
        label = QLabel(event.title or "(No title)")
        label.setFont(QFont(FONT_SMALL, FONT_SMALL_SIZE - 1))
        if done:
            label.setStyleSheet(f"color: {DONE_COLOR}; text-decoration: line-through; "
                                "background: transparent; border: none;")
        else:
            label.setStyleSheet(f"color: white; background-color: {CARD_COLOR}; "
                                "border-radius: 3px; border: none; padding: 1px 4px;")
        return label

    def create_daily_cell(self, controller, cell):
        """Single-day view: every event with its done checkbox."""
        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        content = QWidget()
        layout = QVBoxLayout(content)
        layout.setAlignment(Qt.AlignmentFlag.AlignTop)
        layout.setContentsMargins(PADDING, PADDING, PADDING, PADDING)

        day_label = QLabel(str(cell.date.day))
        day_label.setFont(QFont(FONT_HEADER, FONT_HEADER_SIZE, QFont.Weight.Bold))
        layout.addWidget(day_label)

        if not cell.events:
            empty_label = QLabel("No events for this day.")
            empty_label.setStyleSheet(f"color: {DONE_COLOR}; font-style: italic;")
            layout.addWidget(empty_label)

        for event in cell.events:
            row = QFrame()
            row_layout = QHBoxLayout(row)
            row_layout.setContentsMargins(0, 2, 0, 2)

            checkbox = QCheckBox()
            checkbox.setChecked(controller.is_done(event.id))
            checkbox.toggled.connect(lambda _checked, event_id=event.id: self.controller.toggle_done(event_id))
            row_layout.addWidget(checkbox)

            row_layout.addWidget(self.create_event_label(event, controller.is_done(event.id)), 1)

            time_label = QLabel(event_time_text(event))
            time_label.setFont(QFont(FONT_SMALL, FONT_SMALL_SIZE))
            row_layout.addWidget(time_label)
            layout.addWidget(row)

        scroll.setWidget(content)
        return scroll

    def wheelEvent(self, event):
        """Handle mouse wheel events to navigate through months in monthly view."""
        if self.pages.currentIndex() == CALENDAR_PAGE and self.controller.zoom == ZOOM_MONTHLY:
            delta = event.angleDelta().y()
            if delta < 0:
                self.controller.go_next()
            elif delta > 0:
                self.controller.go_prev()
            event.accept()
        else:
            super().wheelEvent(event)

    def closeEvent(self, event):
        """Handle window close event."""
        self.controller.dispose()
        self.worker.stop()
        self.day_dialog.hide()
        self.add_event_dialog.hide()
        event.accept()
