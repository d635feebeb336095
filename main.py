import sys
import logging
from PyQt6.QtWidgets import QApplication
from bettrcalendar.api.auth import AuthManager
from bettrcalendar.api.calendar import CalendarManager
from bettrcalendar.core.config import DONE_EVENTS_FILE, LOG_FORMAT, LOG_LEVEL
from bettrcalendar.core.controller import CalendarController
from bettrcalendar.core.overlay import CompletionOverlay
from bettrcalendar.core.storage import JsonFileStorage
from bettrcalendar.ui.calendar_window import CalendarApp
from bettrcalendar.workers.api_worker import APIWorker

def main():
    """Main entry point for the application."""
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)

    # Initialize services
    auth_manager = AuthManager()
    calendar_manager = CalendarManager(auth_manager)
    overlay = CompletionOverlay(JsonFileStorage(DONE_EVENTS_FILE))

    # Create and start the application
    app = QApplication(sys.argv)

    # Set style to fusion for better appearance
    app.setStyle("Fusion")

    worker = APIWorker()
    controller = CalendarController(calendar_manager, overlay, worker.add_task)

    # Create and show main window
    main_window = CalendarApp(auth_manager, controller, worker)
    main_window.show()
    main_window.start()

    # Start the event loop
    sys.exit(app.exec())

if __name__ == "__main__":
    main()
