"""State machine behind the calendar window.

The controller never touches Qt. Provider calls are handed to a submit
callable (APIWorker.add_task in the app) and their outcomes come back through
on_task_completed / on_task_error together with the request id they were
issued under. Only the newest request of each kind is applied.
"""
import logging
from datetime import date

from bettrcalendar.core.bucketer import bucket_events, events_for_day, preview
from bettrcalendar.core.config import DEFAULT_ZOOM, FETCH_DAYS_AHEAD, MAX_EVENTS_PER_CELL, ZOOM_LEVELS
from bettrcalendar.core.errors import AuthError, ValidationError
from bettrcalendar.core.windows import build_window, fetch_range, shift_reference, window_title

logger = logging.getLogger(__name__)

LOADING = 'loading'
ERROR = 'error'
READY = 'ready'

FETCH_EVENTS = 'fetch_events'
CREATE_EVENT = 'create_event'


class DayCell:
    """One slot of the grid, ready to render."""
    def __init__(self, day, events=None, is_today=False, limit=MAX_EVENTS_PER_CELL):
        self.date = day
        self.events = events or []
        self.visible, self.hidden_count = preview(self.events, limit)
        self.is_today = is_today

    @property
    def is_padding(self):
        return self.date is None


class CalendarController:
    def __init__(self, gateway, overlay, submit, today=date.today, days_ahead=FETCH_DAYS_AHEAD):
        self.gateway = gateway
        self.overlay = overlay
        self.submit = submit
        self.today = today
        self.days_ahead = days_ahead

        self.state = LOADING
        self.error_message = None
        self.needs_sign_in = False
        self.events = []

        self.zoom = DEFAULT_ZOOM
        self.reference = today()
        self.day_detail_date = None
        self.add_event_open = False
        self.add_event_pending = False
        self.add_event_error = None
        self.form_resets = 0

        self.mounted = False
        self._request_counter = 0
        self._latest = {FETCH_EVENTS: None, CREATE_EVENT: None}
        self._creates_in_flight = set()
        self._listeners = []

    # Listeners

    def subscribe(self, callback):
        self._listeners.append(callback)

    def _notify(self):
        for callback in list(self._listeners):
            callback(self)

    # Requests

    def _issue(self, task_type, func, **kwargs):
        self._request_counter += 1
        request_id = self._request_counter
        self._latest[task_type] = request_id
        if task_type == CREATE_EVENT:
            self._creates_in_flight.add(request_id)
        self.submit(task_type, func, request_id, **kwargs)
        return request_id

    def _is_current(self, task_type, request_id):
        return task_type in self._latest and self._latest[task_type] == request_id

    def _fetch(self):
        self.state = LOADING
        self.error_message = None
        window_start, window_end = fetch_range(self.reference, self.days_ahead)
        return self._issue(FETCH_EVENTS, self.gateway.list_events,
                           window_start=window_start, window_end=window_end)

    def mount(self):
        """Start the one initial fetch. Later calls do nothing."""
        if self.mounted:
            return False
        self.mounted = True
        self.needs_sign_in = False
        logger.info("Loading calendar")
        self._fetch()
        self._notify()
        return True

    def retry(self):
        """Reload events after an error, or on explicit request."""
        self.mounted = True
        self.needs_sign_in = False
        self._fetch()
        self._notify()

    def dispose(self):
        """Forget everything in flight; late results are dropped."""
        self._forget_requests()
        self._listeners = []

    def sign_out(self):
        """Drop the session state so nothing from the old account is shown."""
        self._forget_requests()
        self.mounted = False
        self.needs_sign_in = True
        self.state = LOADING
        self.error_message = None
        self.events = []
        self.day_detail_date = None
        self.add_event_open = False
        self.add_event_pending = False
        self.add_event_error = None
        logger.info("Signed out; cleared calendar state")
        self._notify()

    def _forget_requests(self):
        self._latest = {task_type: None for task_type in self._latest}
        self._creates_in_flight.clear()

    def on_task_completed(self, result, task_type, request_id):
        if task_type == CREATE_EVENT:
            self._on_create_completed(request_id)
            return
        if not self._is_current(task_type, request_id):
            logger.debug("Dropping stale %s result #%d", task_type, request_id)
            return

        self.events = list(result)
        self.state = READY
        self.error_message = None
        logger.info("Loaded %d events", len(self.events))
        self._notify()

    def _on_create_completed(self, request_id):
        """Every saved event triggers a refetch; only the newest create drives the dialog."""
        if request_id not in self._creates_in_flight:
            logger.debug("Dropping forgotten create result #%d", request_id)
            return
        self._creates_in_flight.discard(request_id)

        if self._is_current(CREATE_EVENT, request_id):
            self.add_event_pending = False
            self.add_event_open = False
            self.add_event_error = None
            self.form_resets += 1
        self._fetch()
        self._notify()

    def on_task_error(self, error, task_type, request_id):
        if task_type == CREATE_EVENT:
            if request_id not in self._creates_in_flight:
                logger.debug("Dropping forgotten create error #%d", request_id)
                return
            self._creates_in_flight.discard(request_id)
        if not self._is_current(task_type, request_id):
            logger.debug("Dropping stale %s error #%d", task_type, request_id)
            return

        if isinstance(error, AuthError) and error.needs_sign_in:
            self.needs_sign_in = True

        if task_type == FETCH_EVENTS:
            self.state = ERROR
            self.error_message = str(error)
            logger.info("Calendar failed to load: %s", self.error_message)
        elif task_type == CREATE_EVENT:
            self.add_event_pending = False
            self.add_event_error = str(error)
        self._notify()

    # Navigation

    def set_zoom(self, zoom):
        if zoom not in ZOOM_LEVELS:
            raise ValueError(f"Unknown zoom level: {zoom!r}")
        self.zoom = zoom
        self._notify()

    def go_prev(self):
        self.reference = shift_reference(self.reference, self.zoom, -1)
        self._notify()

    def go_next(self):
        self.reference = shift_reference(self.reference, self.zoom, 1)
        self._notify()

    def go_today(self):
        self.reference = self.today()
        self._notify()

    # Dialogs

    def open_day(self, day):
        """Show the detail view for a date. Padding cells pass None and are ignored."""
        if day is None:
            return
        self.day_detail_date = day
        self._notify()

    def close_day_detail(self):
        self.day_detail_date = None
        self._notify()

    def open_add_event(self):
        self.add_event_open = True
        self._notify()

    def close_add_event(self):
        self.add_event_open = False
        self._notify()

    def submit_draft(self, draft):
        """Send a new event. Returns False if the draft is missing required fields."""
        try:
            draft.validate()
        except ValidationError as e:
            self.add_event_error = str(e)
            self._notify()
            return False

        self.add_event_pending = True
        self.add_event_error = None
        self._issue(CREATE_EVENT, self.gateway.create_event, draft=draft)
        self._notify()
        return True

    # Completion flags

    def is_done(self, event_id):
        return self.overlay.is_done(event_id)

    def toggle_done(self, event_id):
        done = self.overlay.toggle(event_id)
        self._notify()
        return done

    # Renderables

    @property
    def day_detail_open(self):
        return self.day_detail_date is not None

    def window(self):
        return build_window(self.reference, self.zoom)

    def title(self):
        return window_title(self.window(), self.reference)

    def cells(self):
        window = self.window()
        buckets = bucket_events(self.events, window)
        today = self.today()
        return [DayCell(slot, buckets.get(slot), is_today=(slot == today)) if slot is not None
                else DayCell(None)
                for slot in window]

    def day_detail_events(self):
        if self.day_detail_date is None:
            return []
        return events_for_day(self.events, self.day_detail_date)
