"""
Thin adapter over the Google Sheets v4 values API.

Only two calls are needed: read the fixed range and overwrite it.  Every
failure the Google stack can raise is funnelled into RemoteUnavailable so the
dataset store has a single error type to degrade on.
"""

from pathlib import Path
from typing import List

import google_auth_httplib2
import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from portfolio import settings
from portfolio.errors import ConfigurationMissing, RemoteUnavailable

Rows = List[List[str]]

# Everything a values().get()/update() round trip can throw at us
_REMOTE_ERRORS = (HttpError, GoogleAuthError, httplib2.HttpLib2Error, OSError)


class SheetsClient:
    def __init__(self, service, spreadsheet_id: str = settings.SPREADSHEET_ID,
                 sheet_range: str = settings.SHEET_RANGE):
        self.service = service
        self.spreadsheet_id = spreadsheet_id
        self.sheet_range = sheet_range

    @classmethod
    def from_credentials_file(cls, path: Path, timeout: float = settings.SHEETS_TIMEOUT,
                              **kwargs) -> "SheetsClient":
        """
        Build a client authenticated with a service-account key file.

        Raises ConfigurationMissing if the file is missing or is not a valid
        service-account key.  Building the service uses the discovery document
        bundled with google-api-python-client, so no network call happens here.
        """
        path = Path(path)
        if not path.exists():
            raise ConfigurationMissing(f"credentials not found at {path}")

        # A key file that is JSON but not an object fails inside google-auth with
        # AttributeError / TypeError rather than ValueError
        try:
            credentials = service_account.Credentials.from_service_account_file(
                str(path), scopes=settings.SHEETS_SCOPES
            )
        except (ValueError, KeyError, AttributeError, TypeError, OSError, GoogleAuthError) as e:
            raise ConfigurationMissing(f"unreadable credentials at {path}: {e}") from e

        # Bounded socket timeout; a hung request counts as a remote failure
        http = google_auth_httplib2.AuthorizedHttp(
            credentials, http=httplib2.Http(timeout=timeout)
        )
        service = build("sheets", "v4", http=http, cache_discovery=False)
        return cls(service, **kwargs)

    def get_values(self) -> Rows:
        """Return the rows of the fixed range ([] when the range is empty)."""
        try:
            response = self.service.spreadsheets().values().get(
                spreadsheetId=self.spreadsheet_id,
                range=self.sheet_range,
            ).execute()
        except _REMOTE_ERRORS as e:
            raise RemoteUnavailable(str(e)) from e
        return response.get("values", [])

    def update_values(self, rows: Rows) -> None:
        """Overwrite the fixed range with rows, stored verbatim (no formulas)."""
        try:
            self.service.spreadsheets().values().update(
                spreadsheetId=self.spreadsheet_id,
                range=self.sheet_range,
                valueInputOption="RAW",
                body={"values": rows},
            ).execute()
        except _REMOTE_ERRORS as e:
            raise RemoteUnavailable(str(e)) from e
