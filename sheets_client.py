"""
sheets_client.py — Google Sheets session and the remote calls the recorder uses.
Uses the Google Sheets API v4 with a service account.

Only four request shapes are sent to the service: spreadsheet metadata,
full grid data, and batchUpdate carrying addSheet / updateCells /
appendCells requests.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any

import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2.service_account import Credentials
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

import config

logger = logging.getLogger(__name__)


# ── Errors ────────────────────────────────────────────────────────

class LicenseSheetError(Exception):
    """Base class for every failure that aborts a recorder run."""


class AuthError(LicenseSheetError):
    """Credentials are missing or invalid, or no session could be opened."""


class RemoteCallError(LicenseSheetError):
    """A round-trip to the Sheets API failed."""


class DataError(LicenseSheetError):
    """Sheet contents or event fields cannot be turned into a row."""


# ── Session ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class SpreadsheetHandle:
    """Authenticated spreadsheets() resource bound to one spreadsheet."""
    sheets: Any
    spreadsheet_id: str


def get_service(credentials_file: str | None = None):
    """Authenticate with the service account and return a Sheets API service."""
    path = credentials_file or config.SERVICE_ACCOUNT_FILE
    if not os.path.isfile(path):
        raise AuthError(
            f"Service account file not found: {path}. "
            "Set GOOGLE_APPLICATION_CREDENTIALS to the JSON key path."
        )
    try:
        creds = Credentials.from_service_account_file(path, scopes=config.SHEETS_SCOPES)
        service = build("sheets", "v4", credentials=creds, cache_discovery=False)
    except (OSError, ValueError, GoogleAuthError, HttpError) as e:
        raise AuthError(f"Unable to retrieve Sheets client: {e}") from e
    return service.spreadsheets()


def open_spreadsheet(spreadsheet_id: str, credentials_file: str | None = None,
                     sheets=None) -> SpreadsheetHandle:
    """
    Open a session on one spreadsheet.
    `sheets` may be passed to reuse an existing spreadsheets() resource.
    """
    if not spreadsheet_id:
        raise AuthError("No spreadsheet ID configured.")
    sheets = sheets or get_service(credentials_file)
    logger.info("Opened spreadsheet %s.", spreadsheet_id)
    return SpreadsheetHandle(sheets=sheets, spreadsheet_id=spreadsheet_id)


# ── Remote calls ──────────────────────────────────────────────────

def _execute(request, action: str) -> dict:
    try:
        return request.execute()
    except HttpError as e:
        raise RemoteCallError(f"unable to {action}: {e}") from e
    except GoogleAuthError as e:
        raise AuthError(f"unable to {action}: {e}") from e
    except (OSError, httplib2.HttpLib2Error) as e:
        raise RemoteCallError(f"unable to {action}: {type(e).__name__}: {e}") from e


def fetch_metadata(handle: SpreadsheetHandle) -> dict:
    """Return spreadsheet metadata (tab titles and IDs, no cell data)."""
    return _execute(
        handle.sheets.get(spreadsheetId=handle.spreadsheet_id),
        "retrieve spreadsheet metadata",
    )


def fetch_grid_data(handle: SpreadsheetHandle) -> dict:
    """Return the spreadsheet with full grid data for every tab."""
    return _execute(
        handle.sheets.getByDataFilter(
            spreadsheetId=handle.spreadsheet_id,
            body={"includeGridData": True},
        ),
        "retrieve data from sheet",
    )


def batch_update(handle: SpreadsheetHandle, requests: list[dict]) -> dict:
    """Send an ordered list of requests as one batchUpdate call."""
    logger.debug("batchUpdate on %s: %s", handle.spreadsheet_id,
                 [next(iter(r)) for r in requests])
    return _execute(
        handle.sheets.batchUpdate(
            spreadsheetId=handle.spreadsheet_id,
            body={
                "requests": requests,
                "includeSpreadsheetInResponse": False,
                "responseIncludeGridData": False,
            },
        ),
        "update",
    )
