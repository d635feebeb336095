from datetime import date, datetime

from bettrcalendar.core.errors import ValidationError
from bettrcalendar.core.utils import parse_iso_from_api, to_local_date


class AllDay:
    """Start of an all-day event: a calendar date with no time zone."""
    def __init__(self, day):
        self.date = day

    def local_date(self):
        return self.date

    def __eq__(self, other):
        return isinstance(other, AllDay) and other.date == self.date

    def __repr__(self):
        return f"AllDay({self.date.isoformat()})"


class Timed:
    """Start of a timed event: a precise instant."""
    def __init__(self, instant):
        self.instant = instant

    def local_date(self):
        return to_local_date(self.instant)

    def __eq__(self, other):
        return isinstance(other, Timed) and other.instant == self.instant

    def __repr__(self):
        return f"Timed({self.instant.isoformat()})"


def effective_start(field):
    """Convert a raw Google start/end field into AllDay or Timed.

    Returns None when the field carries neither 'dateTime' nor 'date', or when
    the value cannot be parsed.
    """
    if not isinstance(field, dict):
        return None
    try:
        if field.get('dateTime'):
            return Timed(parse_iso_from_api(field['dateTime']))
        if field.get('date'):
            return AllDay(date.fromisoformat(field['date']))
    except (TypeError, ValueError):
        return None
    return None


class Event:
    """A calendar event as returned by the provider."""
    def __init__(self, event_id, title, start, end, calendar_summary=None):
        self.id = event_id
        self.title = title
        self.start = start
        self.end = end
        self.calendar_summary = calendar_summary
        self.effective_start = effective_start(start)

    @classmethod
    def from_api(cls, item, calendar_summary=None):
        return cls(
            item.get('id', ''),
            item.get('summary', ''),
            item.get('start') or {},
            item.get('end') or {},
            calendar_summary=calendar_summary,
        )

    @property
    def is_all_day(self):
        return isinstance(self.effective_start, AllDay)

    def local_date(self):
        """Calendar date the event starts on, or None if it has no start."""
        if self.effective_start is None:
            return None
        return self.effective_start.local_date()

    def __repr__(self):
        return f"Event({self.id!r}, {self.title!r}, {self.effective_start!r})"


class EventDraft:
    """User-entered fields of a new event, pending submission."""
    def __init__(self, title='', description='', location='', all_day=False,
                 start_date='', start_time='', end_date='', end_time='',
                 guests='', recurrence='', color=''):
        self.title = title
        self.description = description
        self.location = location
        self.all_day = all_day
        self.start_date = start_date
        self.start_time = start_time
        self.end_date = end_date
        self.end_time = end_time
        self.guests = guests
        self.recurrence = recurrence
        self.color = color

    def validate(self):
        """Check the fields the form marks as required."""
        if not self.title.strip():
            raise ValidationError("Title is required.")
        if not self.start_date or not self.end_date:
            raise ValidationError("Start and end dates are required.")
        if not self.all_day and (not self.start_time or not self.end_time):
            raise ValidationError("Start and end times are required unless the event is all day.")
        try:
            for day, time in ((self.start_date, self.start_time), (self.end_date, self.end_time)):
                datetime.fromisoformat(day if self.all_day else f"{day}T{time}")
        except ValueError as e:
            raise ValidationError("Invalid date or time.") from e

    def _boundary(self, day, time):
        if self.all_day:
            return {'date': day}
        return {'dateTime': f"{day}T{time}"}

    def guest_list(self):
        if not self.guests:
            return []
        return [{'email': email.strip()} for email in self.guests.split(',')]

    def to_api_body(self):
        """Build the Google Calendar insert body; empty fields are left out."""
        body = {
            'summary': self.title,
            'description': self.description,
            'location': self.location,
            'start': self._boundary(self.start_date, self.start_time),
            'end': self._boundary(self.end_date, self.end_time),
        }
        if self.guests:
            body['attendees'] = self.guest_list()
        if self.recurrence:
            body['recurrence'] = [self.recurrence]
        if self.color:
            body['colorId'] = self.color
        return {key: value for key, value in body.items() if value not in (None, '')}
