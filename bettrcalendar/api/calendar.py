import json
import logging
from googleapiclient.errors import HttpError
from google.auth.exceptions import TransportError
from bettrcalendar.core.utils import format_iso_for_api
from bettrcalendar.core.config import DEFAULT_CALENDAR_ID, API_MAX_RESULTS
from bettrcalendar.core.errors import AuthError, CalendarError, ProviderAccessError, ValidationError
from bettrcalendar.core.models import Event

logger = logging.getLogger(__name__)


def parse_http_error(error):
    """Extract status code, reason and message from a Google HttpError."""
    status_code = getattr(error.resp, 'status', None)
    error_content = {}

    try:
        content = error.content.decode('utf-8') if isinstance(error.content, bytes) else error.content
        error_content = json.loads(content)
    except (TypeError, ValueError, AttributeError):
        pass

    error_info = error_content.get('error', {}) if isinstance(error_content, dict) else {}
    if not isinstance(error_info, dict):
        error_info = {}
    errors = error_info.get('errors') or [{}]
    reason = errors[0].get('reason', 'unknown')
    message = error_info.get('message', str(error))
    return int(status_code) if status_code else None, reason, message


def auth_error_for(status_code, reason):
    """Map an HTTP failure to an AuthError, or None if it is not about credentials."""
    if status_code == 401:
        return AuthError(AuthError.INVALID_TOKEN)
    if status_code == 403 and reason in ('insufficientPermissions', 'ACCESS_TOKEN_SCOPE_INSUFFICIENT'):
        return AuthError(AuthError.INSUFFICIENT_SCOPE)
    return None


class CalendarManager:
    """Lists and creates Google Calendar events for the signed-in user."""

    def __init__(self, auth_manager, max_results=API_MAX_RESULTS):
        """Initialize with an auth manager."""
        self.auth_service = auth_manager
        self.max_results = max_results
        self.last_truncated = []

    def _service(self):
        try:
            return self.auth_service.get_calendar_service()
        except TransportError as e:
            logger.error("Could not build calendar service: %s", e)
            raise ProviderAccessError("Could not reach Google Calendar.") from e

    def list_calendars(self, service):
        """Get every calendar the identity can see."""
        try:
            result = service.calendarList().list().execute()
        except HttpError as e:
            status_code, reason, message = parse_http_error(e)
            logger.error("Error fetching calendar list (%s %s): %s", status_code, reason, message)
            raise auth_error_for(status_code, reason) or ProviderAccessError() from e
        except (TransportError, OSError) as e:
            logger.error("Error fetching calendar list: %s", e)
            raise ProviderAccessError() from e

        calendars = result.get('items', [])
        logger.debug("Available calendars: %s", [cal.get('summary') for cal in calendars])
        return calendars

    def list_events(self, window_start, window_end):
        """Fetch events from all calendars between two instants.

        Recurring events are expanded; each calendar contributes at most
        max_results events and extra pages are dropped with a warning.
        """
        service = self._service()
        calendars = self.list_calendars(service)
        logger.info("Fetching events from %s to %s", window_start.isoformat(), window_end.isoformat())

        params = {
            'timeMin': format_iso_for_api(window_start),
            'timeMax': format_iso_for_api(window_end),
            'maxResults': self.max_results,
            'singleEvents': True,
            'orderBy': 'startTime',
            'showDeleted': False,
            'showHiddenInvitations': False,
        }

        events = []
        truncated = []
        for cal in calendars:
            summary = cal.get('summary', cal.get('id'))
            try:
                events_result = service.events().list(calendarId=cal['id'], **params).execute()
            except HttpError as e:
                status_code, reason, message = parse_http_error(e)
                auth_error = auth_error_for(status_code, reason)
                if auth_error:
                    raise auth_error from e
                logger.error("Failed to fetch events for calendar %s: %s", summary, message)
                continue
            except (TransportError, OSError) as e:
                logger.error("Failed to fetch events for calendar %s: %s", summary, e)
                continue

            if events_result.get('nextPageToken'):
                logger.warning("Calendar %s has more than %d events in range; showing the first %d",
                               summary, self.max_results, self.max_results)
                truncated.append(summary)

            events.extend(Event.from_api(item, calendar_summary=summary)
                          for item in events_result.get('items', []))

        self.last_truncated = truncated
        logger.info("Total events fetched from all calendars: %d", len(events))
        return events

    def create_event(self, draft, calendar_id=DEFAULT_CALENDAR_ID):
        """Create an event from a draft on the primary calendar."""
        draft.validate()
        service = self._service()

        try:
            result = service.events().insert(
                calendarId=calendar_id,
                body=draft.to_api_body()
            ).execute()
        except HttpError as e:
            status_code, reason, message = parse_http_error(e)
            logger.error("Error creating event (%s %s): %s", status_code, reason, message)
            auth_error = auth_error_for(status_code, reason)
            if auth_error:
                raise auth_error from e
            if status_code == 400:
                raise ValidationError(f"Google rejected the event: {message}") from e
            raise CalendarError("Failed to create event") from e
        except (TransportError, OSError) as e:
            logger.error("Error creating event: %s", e)
            raise CalendarError("Failed to create event") from e

        logger.info("Created event %s", result.get('id'))
        return Event.from_api(result)
