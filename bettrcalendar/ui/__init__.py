# UI modules initialization
from bettrcalendar.ui.event_dialog import AddEventDialog
from bettrcalendar.ui.day_dialog import DayDialog
from bettrcalendar.ui.calendar_window import CalendarApp

__all__ = ['AddEventDialog', 'DayDialog', 'CalendarApp']
