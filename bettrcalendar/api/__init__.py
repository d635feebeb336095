# API modules initialization
from bettrcalendar.api.auth import AuthManager
from bettrcalendar.api.calendar import CalendarManager

__all__ = ['AuthManager', 'CalendarManager']
