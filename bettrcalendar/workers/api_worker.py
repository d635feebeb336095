import logging
import queue
from PyQt6.QtCore import QThread, pyqtSignal
from bettrcalendar.core.errors import CalendarError

logger = logging.getLogger(__name__)

FALLBACK_MESSAGES = {
    'fetch_events': "Failed to fetch calendar events",
    'create_event': "Failed to create event",
}


class APIWorker(QThread):
    """Worker thread for handling API calls without blocking the UI.

    Each job carries the request id it was issued with so the receiver can
    drop results that have been superseded.
    """
    taskCompleted = pyqtSignal(object, str, int)
    taskError = pyqtSignal(object, str, int)
    loadingChanged = pyqtSignal(bool)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.queue = queue.Queue()
        self.running = True

    def add_task(self, task_type, func, request_id, **kwargs):
        """Add a task to the queue."""
        self.queue.put((task_type, func, request_id, kwargs))

        if not self.isRunning():
            self.start()

    def run(self):
        """Main worker loop that processes queued tasks."""
        while self.running:
            try:
                task_type, func, request_id, kwargs = self.queue.get(block=True, timeout=0.5)
            except queue.Empty:
                continue

            try:
                self.loadingChanged.emit(True)
                result = func(**kwargs)
                self.taskCompleted.emit(result, task_type, request_id)
            except CalendarError as e:
                logger.warning("%s #%d failed: %s", task_type, request_id, e)
                self.taskError.emit(e, task_type, request_id)
            except Exception:
                logger.exception("Unexpected error in worker thread (%s)", task_type)
                self.taskError.emit(CalendarError(FALLBACK_MESSAGES.get(task_type)), task_type, request_id)
            finally:
                self.loadingChanged.emit(False)
                self.queue.task_done()

        logger.debug("Worker thread stopped")

    def stop(self):
        """Stop the worker thread."""
        self.running = False
        self.wait(1000)
