"""Assign fetched events to the dates of a window."""
from bettrcalendar.core.config import MAX_EVENTS_PER_CELL
from bettrcalendar.core.utils import to_local_date


def events_for_day(events, day):
    """Events starting on a calendar date, in the order they were fetched.

    Events without a usable start are never included.
    """
    target = to_local_date(day)
    return [event for event in events if event.local_date() == target]


def bucket_events(events, window):
    """Map every real date of a window to its events. Padding slots are skipped."""
    buckets = {day: [] for day in window.dates}
    for event in events:
        day = event.local_date()
        if day in buckets:
            buckets[day].append(event)
    return buckets


def preview(bucket, limit=MAX_EVENTS_PER_CELL):
    """Split a bucket into the events shown in a cell and the collapsed count."""
    return bucket[:limit], max(len(bucket) - limit, 0)
