import json
import logging
from datetime import datetime, timezone
from unittest.mock import MagicMock

import httplib2
import pytest
from googleapiclient.errors import HttpError

from bettrcalendar.api.calendar import CalendarManager, auth_error_for, parse_http_error
from bettrcalendar.core.errors import AuthError, CalendarError, ProviderAccessError, ValidationError
from bettrcalendar.core.models import EventDraft

WINDOW_START = datetime(2024, 3, 1, tzinfo=timezone.utc)
WINDOW_END = datetime(2024, 4, 15, tzinfo=timezone.utc)


def http_error(status, reason='backendError', message='Something failed'):
    resp = httplib2.Response({'status': status})
    resp.reason = message
    content = json.dumps({'error': {'code': status, 'message': message,
                                    'errors': [{'reason': reason, 'message': message}]}})
    return HttpError(resp, content.encode('utf-8'))


class FakeAuth:
    def __init__(self, service):
        self.service = service

    def get_calendar_service(self):
        return self.service


def make_service(calendars, pages):
    """Service mock whose events().list() answers per calendarId.

    pages maps a calendar id to the execute() result, or to an exception to raise.
    """
    service = MagicMock()
    service.calendarList.return_value.list.return_value.execute.return_value = {'items': calendars}

    def list_events(calendarId, **params):
        request = MagicMock()
        outcome = pages[calendarId]
        if isinstance(outcome, Exception):
            request.execute.side_effect = outcome
        else:
            request.execute.return_value = outcome
        return request

    service.events.return_value.list.side_effect = list_events
    return service


def item(event_id, day):
    return {'id': event_id, 'summary': event_id, 'start': {'date': day}, 'end': {'date': day}}


CALENDARS = [{'id': 'primary', 'summary': 'Me'}, {'id': 'team', 'summary': 'Team'}]


class TestHttpErrorParsing:
    def test_reads_status_reason_and_message(self):
        status, reason, message = parse_http_error(http_error(403, 'insufficientPermissions', 'Nope'))

        assert status == 403
        assert reason == 'insufficientPermissions'
        assert message == 'Nope'

    def test_non_json_body(self):
        error = HttpError(httplib2.Response({'status': 500}), b'<html>oops</html>')
        status, reason, _ = parse_http_error(error)

        assert status == 500
        assert reason == 'unknown'

    @pytest.mark.parametrize("status, reason, kind", [
        (401, 'authError', AuthError.INVALID_TOKEN),
        (403, 'insufficientPermissions', AuthError.INSUFFICIENT_SCOPE),
        (403, 'ACCESS_TOKEN_SCOPE_INSUFFICIENT', AuthError.INSUFFICIENT_SCOPE),
    ])
    def test_auth_failures(self, status, reason, kind):
        assert auth_error_for(status, reason).kind == kind

    @pytest.mark.parametrize("status, reason", [(403, 'rateLimitExceeded'), (404, 'notFound'), (500, 'backendError')])
    def test_other_failures_are_not_auth(self, status, reason):
        assert auth_error_for(status, reason) is None


class TestListEvents:
    def test_queries_every_calendar_with_expanded_recurrences(self):
        service = make_service(CALENDARS, {'primary': {'items': [item('a', '2024-03-02')]},
                                           'team': {'items': [item('b', '2024-03-03')]}})
        manager = CalendarManager(FakeAuth(service), max_results=100)

        events = manager.list_events(WINDOW_START, WINDOW_END)

        assert [event.id for event in events] == ['a', 'b']
        assert [event.calendar_summary for event in events] == ['Me', 'Team']
        calls = service.events.return_value.list.call_args_list
        assert [call.kwargs['calendarId'] for call in calls] == ['primary', 'team']
        params = calls[0].kwargs
        assert params['singleEvents'] is True
        assert params['orderBy'] == 'startTime'
        assert params['maxResults'] == 100
        assert params['showDeleted'] is False
        assert params['timeMin'].startswith('2024-03-01T00:00:00')
        assert params['timeMax'].startswith('2024-04-15T00:00:00')

    def test_failing_calendar_is_skipped(self, caplog):
        service = make_service(CALENDARS, {'primary': http_error(404, 'notFound'),
                                           'team': {'items': [item('b', '2024-03-03')]}})
        manager = CalendarManager(FakeAuth(service))

        with caplog.at_level(logging.ERROR):
            events = manager.list_events(WINDOW_START, WINDOW_END)

        assert [event.id for event in events] == ['b']
        assert "Me" in caplog.text

    def test_revoked_token_aborts_fetch(self):
        service = make_service(CALENDARS, {'primary': http_error(401, 'authError'),
                                           'team': {'items': []}})
        manager = CalendarManager(FakeAuth(service))

        with pytest.raises(AuthError) as excinfo:
            manager.list_events(WINDOW_START, WINDOW_END)
        assert excinfo.value.kind == AuthError.INVALID_TOKEN

    def test_calendar_list_scope_failure(self):
        service = MagicMock()
        service.calendarList.return_value.list.return_value.execute.side_effect = \
            http_error(403, 'insufficientPermissions')
        manager = CalendarManager(FakeAuth(service))

        with pytest.raises(AuthError) as excinfo:
            manager.list_events(WINDOW_START, WINDOW_END)
        assert excinfo.value.kind == AuthError.INSUFFICIENT_SCOPE

    def test_calendar_list_other_failure(self):
        service = MagicMock()
        service.calendarList.return_value.list.return_value.execute.side_effect = http_error(500)
        manager = CalendarManager(FakeAuth(service))

        with pytest.raises(ProviderAccessError):
            manager.list_events(WINDOW_START, WINDOW_END)

    def test_extra_pages_are_dropped_with_warning(self, caplog):
        service = make_service(CALENDARS, {
            'primary': {'items': [item('a', '2024-03-02')], 'nextPageToken': 'more'},
            'team': {'items': []},
        })
        manager = CalendarManager(FakeAuth(service), max_results=1)

        with caplog.at_level(logging.WARNING):
            events = manager.list_events(WINDOW_START, WINDOW_END)

        assert [event.id for event in events] == ['a']
        assert manager.last_truncated == ['Me']
        assert "more than 1 events" in caplog.text


class TestCreateEvent:
    def draft(self, **overrides):
        fields = dict(title='Review', start_date='2024-03-20', start_time='10:00',
                      end_date='2024-03-20', end_time='11:00')
        fields.update(overrides)
        return EventDraft(**fields)

    def test_inserts_on_primary_calendar(self):
        service = MagicMock()
        service.events.return_value.insert.return_value.execute.return_value = {
            'id': 'new', 'summary': 'Review',
            'start': {'dateTime': '2024-03-20T10:00:00Z'}, 'end': {'dateTime': '2024-03-20T11:00:00Z'},
        }
        manager = CalendarManager(FakeAuth(service))

        event = manager.create_event(self.draft(guests='a@example.com'))

        assert event.id == 'new'
        kwargs = service.events.return_value.insert.call_args.kwargs
        assert kwargs['calendarId'] == 'primary'
        assert kwargs['body']['summary'] == 'Review'
        assert kwargs['body']['start'] == {'dateTime': '2024-03-20T10:00'}
        assert kwargs['body']['attendees'] == [{'email': 'a@example.com'}]

    def test_invalid_draft_never_reaches_google(self):
        service = MagicMock()
        manager = CalendarManager(FakeAuth(service))

        with pytest.raises(ValidationError):
            manager.create_event(self.draft(title=''))
        service.events.return_value.insert.assert_not_called()

    def test_rejected_payload_is_validation_error(self):
        service = MagicMock()
        service.events.return_value.insert.return_value.execute.side_effect = \
            http_error(400, 'invalid', 'Invalid colorId')
        manager = CalendarManager(FakeAuth(service))

        with pytest.raises(ValidationError) as excinfo:
            manager.create_event(self.draft(color='99'))
        assert 'Invalid colorId' in str(excinfo.value)

    def test_server_failure(self):
        service = MagicMock()
        service.events.return_value.insert.return_value.execute.side_effect = http_error(503)
        manager = CalendarManager(FakeAuth(service))

        with pytest.raises(CalendarError) as excinfo:
            manager.create_event(self.draft())
        assert str(excinfo.value) == "Failed to create event"
