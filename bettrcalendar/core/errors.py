"""Error types raised by the calendar client.

Everything that reaches the view layer is a CalendarError whose str() is a
message suitable for showing to the user.
"""


class CalendarError(Exception):
    """Base class for all client errors."""

    default_message = "Something went wrong"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)

    @property
    def message(self):
        return str(self)


class AuthError(CalendarError):
    """The session or its credentials cannot be used against the calendar."""

    NO_SESSION = 'no_session'
    MISSING_TOKEN = 'missing_token'
    INVALID_TOKEN = 'invalid_token'
    INSUFFICIENT_SCOPE = 'insufficient_scope'

    MESSAGES = {
        NO_SESSION: "You are not signed in. Please sign in with Google.",
        MISSING_TOKEN: "No access token found. Please sign out and sign in again.",
        INVALID_TOKEN: "Invalid access token. Please sign out and sign in again.",
        INSUFFICIENT_SCOPE: "Token missing calendar scope. Please sign out and sign in again.",
    }

    def __init__(self, kind, message=None):
        self.kind = kind
        super().__init__(message or self.MESSAGES.get(kind))

    @property
    def needs_sign_in(self):
        return self.kind == self.NO_SESSION


class ProviderAccessError(CalendarError):
    """Listing calendars or events failed for an authorized session."""

    default_message = "Failed to access calendar. Please check your Google Calendar permissions."


class ValidationError(CalendarError):
    """An event draft was rejected before or by the provider."""

    default_message = "The event could not be created. Please check the form."


class StorageError(CalendarError):
    """Local storage could not be read or written."""

    default_message = "Local storage is unavailable"
