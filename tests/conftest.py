"""
Pytest configuration and shared fixtures.
"""

from datetime import date, datetime

import pytest

from bettrcalendar.core.controller import CalendarController
from bettrcalendar.core.models import Event
from bettrcalendar.core.overlay import CompletionOverlay
from bettrcalendar.core.storage import MemoryStorage


def local_iso(year, month, day, hour=9, minute=0):
    """ISO dateTime string with the local UTC offset, as Google returns it."""
    return datetime(year, month, day, hour, minute).astimezone().isoformat()


def make_event(event_id, start, title=None, end=None):
    """Build an Event from a date string ('2024-03-15') or a local datetime string."""
    if start is None:
        start_field = {}
    elif 'T' in start:
        start_field = {'dateTime': start}
    else:
        start_field = {'date': start}
    return Event.from_api({
        'id': event_id,
        'summary': title if title is not None else f"Event {event_id}",
        'start': start_field,
        'end': end or start_field,
    })


class RecordingSubmit:
    """Stands in for APIWorker.add_task and keeps every submitted job."""

    def __init__(self):
        self.calls = []

    def __call__(self, task_type, func, request_id, **kwargs):
        self.calls.append((task_type, func, request_id, kwargs))

    def last(self, task_type=None):
        matching = [call for call in self.calls if task_type is None or call[0] == task_type]
        return matching[-1] if matching else None

    def count(self, task_type):
        return sum(1 for call in self.calls if call[0] == task_type)


class FakeGateway:
    def list_events(self, window_start, window_end):
        return []

    def create_event(self, draft):
        return make_event('created', draft.start_date)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def overlay(storage):
    return CompletionOverlay(storage)


@pytest.fixture
def submit():
    return RecordingSubmit()


@pytest.fixture
def today():
    return date(2024, 3, 15)


@pytest.fixture
def controller(overlay, submit, today):
    return CalendarController(FakeGateway(), overlay, submit, today=lambda: today)


@pytest.fixture
def sample_events():
    """Events spread over March 2024, in provider order."""
    return [
        make_event('a', '2024-03-15', title='All hands'),
        make_event('b', local_iso(2024, 3, 15, 9), title='Standup'),
        make_event('c', local_iso(2024, 3, 16, 14), title='Lunch'),
        make_event('d', local_iso(2024, 3, 15, 23, 30), title='Late call'),
        make_event('e', None, title='Broken'),
    ]
