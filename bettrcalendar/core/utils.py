import calendar
from datetime import date, datetime

def convert_to_24(hour_str, period):
    """Convert 12-hour time format to 24-hour format."""
    hour = int(hour_str)
    return 0 if hour == 12 and period == "AM" else (hour if period == "AM" or hour == 12 else hour + 12)

def convert_from_24(hour_24_str):
    """Convert 24-hour time format to 12-hour format with AM/PM."""
    hour_24 = int(hour_24_str)
    if hour_24 == 0: return 12, "AM"
    elif hour_24 < 12: return hour_24, "AM"
    elif hour_24 == 12: return 12, "PM"
    else: return hour_24 - 12, "PM"

def format_datetime(dt, format_type='time', include_minutes=True):
    """Format a date or datetime according to specified format type.

    Args:
        dt: The date or datetime object to format
        format_type: One of 'time', 'month_year', 'short_date', 'long_date'
        include_minutes: For 'time' format, whether to include minutes
    """
    if format_type == 'time':
        if include_minutes:
            return dt.strftime('%I:%M%p').lstrip('0').replace(':00', '').lower()
        else:
            return dt.strftime('%I%p').lstrip('0').lower()
    elif format_type == 'month_year':
        return f"{calendar.month_name[dt.month]} {dt.year}"
    elif format_type == 'short_date':
        return f"{calendar.month_abbr[dt.month]} {dt.day}, {dt.year}"
    elif format_type == 'long_date':
        return f"{calendar.month_name[dt.month]} {dt.day}, {dt.year}"
    else:
        return str(dt)

def format_iso_for_api(dt):
    """Format datetime as ISO format for Google API."""
    return dt.isoformat().replace('+00:00', 'Z')

def parse_iso_from_api(iso_str):
    """Parse ISO datetime string from Google API."""
    return datetime.fromisoformat(iso_str.replace('Z', '+00:00'))

def local_midnight(day):
    """Return an aware datetime at local midnight of a calendar date."""
    local_tz = datetime.now().astimezone().tzinfo
    return datetime.combine(day, datetime.min.time()).replace(tzinfo=local_tz)

def to_local_date(value):
    """Normalize a date or datetime to a calendar date in the local time zone."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"Expected date or datetime, got {type(value).__name__}")
