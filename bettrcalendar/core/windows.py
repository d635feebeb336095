"""Visible date windows for the monthly, weekly and daily views."""
from calendar import monthrange
from datetime import date, timedelta

from bettrcalendar.core.config import ZOOM_LEVELS, ZOOM_MONTHLY, ZOOM_WEEKLY
from bettrcalendar.core.utils import format_datetime, local_midnight, to_local_date


class DateWindow:
    """Ordered slots of a view. Padding slots are None and never hold events."""
    def __init__(self, zoom, slots):
        self.zoom = zoom
        self.slots = slots

    @property
    def dates(self):
        return [slot for slot in self.slots if slot is not None]

    @property
    def padding(self):
        return sum(1 for slot in self.slots if slot is None)

    def __len__(self):
        return len(self.slots)

    def __iter__(self):
        return iter(self.slots)

    def __repr__(self):
        return f"DateWindow({self.zoom!r}, {len(self.slots)} slots)"


def _check_zoom(zoom):
    if zoom not in ZOOM_LEVELS:
        raise ValueError(f"Unknown zoom level: {zoom!r}")


def sunday_index(day):
    """Weekday index with Sunday as 0."""
    return (day.weekday() + 1) % 7


def start_of_week(reference):
    """Most recent Sunday at or before the reference date."""
    day = to_local_date(reference)
    return day - timedelta(days=sunday_index(day))


def month_dates(year, month):
    return [date(year, month, day) for day in range(1, monthrange(year, month)[1] + 1)]


def build_window(reference, zoom):
    """Compute the slots rendered for a reference date at a zoom level."""
    _check_zoom(zoom)
    day = to_local_date(reference)

    if zoom == ZOOM_WEEKLY:
        start = start_of_week(day)
        return DateWindow(zoom, [start + timedelta(days=i) for i in range(7)])

    if zoom == ZOOM_MONTHLY:
        first = day.replace(day=1)
        padding = [None] * sunday_index(first)
        return DateWindow(zoom, padding + month_dates(day.year, day.month))

    return DateWindow(zoom, [day])


def shift_reference(reference, zoom, step):
    """Move the reference date one view back (step=-1) or forward (step=1).

    Monthly navigation lands on day 1 so short months never overflow.
    """
    _check_zoom(zoom)
    day = to_local_date(reference)

    if zoom == ZOOM_MONTHLY:
        month_index = day.year * 12 + (day.month - 1) + step
        year, month = divmod(month_index, 12)
        return day.replace(year=year, month=month + 1, day=1)
    if zoom == ZOOM_WEEKLY:
        return day + timedelta(days=7 * step)
    return day + timedelta(days=step)


def fetch_range(reference, days_ahead):
    """Span to request from the provider around a reference date.

    Starts at local midnight of the first day of the reference month and ends
    at local midnight after the later of month end and reference + days_ahead.
    """
    day = to_local_date(reference)
    first = day.replace(day=1)
    last = day.replace(day=monthrange(day.year, day.month)[1])
    last = max(last, day + timedelta(days=days_ahead))
    return local_midnight(first), local_midnight(last + timedelta(days=1))


def window_title(window, reference):
    """Header text for a window."""
    day = to_local_date(reference)
    if window.zoom == ZOOM_MONTHLY:
        return format_datetime(day, 'month_year')
    if window.zoom == ZOOM_WEEKLY:
        return f"Week of {format_datetime(window.dates[0], 'short_date')}"
    return format_datetime(day, 'short_date')
