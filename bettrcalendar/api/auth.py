import os
import json
import logging
import datetime
from datetime import timezone
from google.auth.exceptions import RefreshError, TransportError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from bettrcalendar.core.config import CREDENTIALS_FILE, TOKEN_FILE, SCOPES, CALENDAR_SCOPE
from bettrcalendar.core.errors import AuthError, ProviderAccessError

logger = logging.getLogger(__name__)


class AuthManager:
    """Class to handle Google API authentication."""

    def __init__(self, token_file=TOKEN_FILE, credentials_file=CREDENTIALS_FILE):
        """Initialize the authentication manager."""
        self.token_file = token_file
        self.credentials_file = credentials_file
        self.creds = None
        self.refresh_buffer = 300
        self.services = {}

    def has_session(self):
        """Whether a stored sign-in exists."""
        return self.creds is not None or os.path.exists(self.token_file)

    def load_credentials(self):
        """Load credentials from the token file."""
        if not os.path.exists(self.token_file):
            raise AuthError(AuthError.NO_SESSION)

        try:
            with open(self.token_file, 'r') as token:
                info = json.load(token)
            if not isinstance(info, dict):
                raise ValueError("token file does not hold a JSON object")
            self.creds = Credentials.from_authorized_user_info(info)
        except (OSError, ValueError) as e:
            logger.warning("Stored token is unusable: %s", e)
            raise AuthError(AuthError.MISSING_TOKEN) from e

        if not self.creds.token and not self.creds.refresh_token:
            raise AuthError(AuthError.MISSING_TOKEN)
        return self.creds

    def get_credentials(self):
        """Return verified credentials, refreshing them if needed."""
        if not self.creds:
            self.load_credentials()

        self.refresh_token_if_needed()

        if not self.creds.has_scopes([CALENDAR_SCOPE]):
            logger.info("Token missing calendar scope")
            raise AuthError(AuthError.INSUFFICIENT_SCOPE)
        return self.creds

    def refresh_token_if_needed(self):
        """Check if token needs refreshing and refresh it if necessary."""
        if not self.creds.token:
            self.refresh_token()
            return

        expiry = self.creds.expiry
        if expiry is None:
            return
        if expiry.tzinfo is None:
            expiry = expiry.replace(tzinfo=timezone.utc)

        time_until_expiry = (expiry - datetime.datetime.now(timezone.utc)).total_seconds()
        if time_until_expiry < self.refresh_buffer:
            logger.info("Token will expire soon (%.1f seconds). Refreshing...", time_until_expiry)
            self.refresh_token()

    def refresh_token(self):
        """Refresh the stored credentials and save them."""
        if not self.creds.refresh_token:
            raise AuthError(AuthError.INVALID_TOKEN)
        try:
            self.creds.refresh(Request())
        except RefreshError as e:
            logger.warning("Token refresh rejected: %s", e)
            raise AuthError(AuthError.INVALID_TOKEN) from e
        except TransportError as e:
            logger.error("Token refresh failed: %s", e)
            raise ProviderAccessError("Could not reach Google to refresh your sign-in.") from e

        self.save_credentials()
        self.services = {}

    def save_credentials(self):
        directory = os.path.dirname(self.token_file)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.token_file, 'w') as token:
            token.write(self.creds.to_json())

    def sign_in(self):
        """Run the browser consent flow and store the resulting token."""
        flow = InstalledAppFlow.from_client_secrets_file(self.credentials_file, SCOPES)
        self.creds = flow.run_local_server(port=0, prompt='consent', access_type='offline')
        self.save_credentials()
        self.services = {}
        logger.info("Signed in")
        return self.creds

    def sign_out(self):
        """Forget the stored token."""
        self.creds = None
        self.services = {}
        if os.path.exists(self.token_file):
            os.remove(self.token_file)
        logger.info("Signed out")

    def get_service(self, service_name, version):
        """Get an authenticated service instance with caching."""
        creds = self.get_credentials()

        cache_key = f"{service_name}_{version}"
        if cache_key in self.services:
            return self.services[cache_key]

        from googleapiclient.discovery import build
        service = build(service_name, version, credentials=creds, cache_discovery=False)
        self.services[cache_key] = service
        return service

    def get_calendar_service(self):
        """Get an authenticated calendar service instance."""
        return self.get_service('calendar', 'v3')
