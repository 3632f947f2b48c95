"""
license_sheet.py — Per-product tabs and license rows.
Resolves (or creates) the tab for a product and writes one event row into it.
"""

import enum
import logging
import re
from typing import Optional

import config
import sheets_client
from license_event import LicenseEvent
from sheets_client import DataError, RemoteCallError, SpreadsheetHandle

logger = logging.getLogger(__name__)


class WriteStrategy(enum.Enum):
    """How a row lands in the tab.

    OVERWRITE finds the first unused row, derives SL from the row above and
    writes the five cells in one request. APPEND lets the service pick the
    row and always writes SL "1"; SL does not increment under APPEND.
    """
    OVERWRITE = "overwrite"
    APPEND = "append"


def _string_cell(value: str, formatted: bool = False) -> dict:
    cell = {"userEnteredValue": {"stringValue": str(value)}}
    if formatted:
        cell["userEnteredFormat"] = {
            "textFormat": {"bold": True},
            "backgroundColor": config.HEADER_BACKGROUND,
        }
    return cell


def _row_data(values: list[str], formatted: bool = False) -> dict:
    return {"values": [_string_cell(v, formatted) for v in values]}


def _tab_rows(grid: dict, tab_id: int) -> Optional[list[dict]]:
    """Return rowData of the tab's first grid, or None if the tab is not in the response."""
    for s in grid.get("sheets", []):
        if s.get("properties", {}).get("sheetId", 0) == tab_id:
            data = s.get("data") or [{}]
            return data[0].get("rowData", [])
    return None


def _fetch_tab_rows(handle: SpreadsheetHandle, tab_id: int) -> list[dict]:
    rows = _tab_rows(sheets_client.fetch_grid_data(handle), tab_id)
    if rows is None:
        raise RemoteCallError(f"no empty cell found: tab {tab_id} not in spreadsheet")
    return rows


def _cell_text(row: dict, column: int) -> str:
    values = row.get("values", [])
    if column >= len(values):
        return ""
    return values[column].get("formattedValue", "")


# ── Tab resolver ──────────────────────────────────────────────────

def find_tab_id(handle: SpreadsheetHandle, title: str) -> Optional[int]:
    """Return the sheetId of the tab titled exactly `title`, or None."""
    meta = sheets_client.fetch_metadata(handle)
    for s in meta.get("sheets", []):
        props = s.get("properties", {})
        if props.get("title") == title:
            return props.get("sheetId", 0)
    return None


def write_header(handle: SpreadsheetHandle, tab_id: int):
    """Write the bold, coloured header row into row 0 of the tab."""
    sheets_client.batch_update(handle, [{
        "updateCells": {
            "start": {"sheetId": tab_id, "rowIndex": 0, "columnIndex": 0},
            "rows": [_row_data(config.HEADERS, formatted=True)],
            "fields": "userEnteredValue,userEnteredFormat",
        }
    }])
    logger.info("Wrote %d headers to tab %d.", len(config.HEADERS), tab_id)


def ensure_tab(handle: SpreadsheetHandle, product: str) -> int:
    """
    Return the tab ID for `product`, creating the tab and its header if missing.
    """
    tab_id = find_tab_id(handle, product)
    if tab_id is not None:
        logger.debug("Tab '%s' exists (id=%d).", product, tab_id)
        return tab_id

    sheets_client.batch_update(handle, [{"addSheet": {"properties": {"title": product}}}])
    tab_id = find_tab_id(handle, product)
    if tab_id is None:
        raise RemoteCallError(f"tab '{product}' not found after creating it")
    logger.info("Created tab '%s' (id=%d).", product, tab_id)

    write_header(handle, tab_id)
    return tab_id


# ── Row writer ────────────────────────────────────────────────────

def find_next_row(handle: SpreadsheetHandle, tab_id: int) -> int:
    """
    Return the first unused row index of the tab.
    Assumes rows only grow at the end (no blank rows inside the used range).
    """
    return len(_fetch_tab_rows(handle, tab_id))


def next_sequence(previous: str) -> str:
    """SL value that follows `previous`: the header literal starts at 1."""
    if previous == config.HEADER_LITERAL:
        return "1"
    if not re.fullmatch(r"[+-]?[0-9]+", previous):
        raise DataError(f"previous SL value {previous!r} is not a number")
    return str(int(previous) + 1)


def insert_record(handle: SpreadsheetHandle, tab_id: int, event: LicenseEvent) -> int:
    """
    Overwrite the first unused row with the event, SL derived from the row above.
    Returns the 0-based row index written.
    """
    rows = _fetch_tab_rows(handle, tab_id)
    row = len(rows)
    if row == 0:
        raise DataError(f"tab {tab_id} has no header row")

    sequence = next_sequence(_cell_text(rows[row - 1], 0))
    sheets_client.batch_update(handle, [{
        "updateCells": {
            "start": {"sheetId": tab_id, "rowIndex": row, "columnIndex": 0},
            "rows": [_row_data(event.as_row(sequence))],
            "fields": "userEnteredValue",
        }
    }])
    logger.info("Wrote %s (SL=%s) to row %d of tab %d.", event.email, sequence, row, tab_id)
    return row


def append_record(handle: SpreadsheetHandle, tab_id: int, event: LicenseEvent):
    """Append the event after the last row; SL is always "1"."""
    sheets_client.batch_update(handle, [{
        "appendCells": {
            "sheetId": tab_id,
            "rows": [_row_data(event.as_row("1"))],
            "fields": "userEnteredValue",
        }
    }])
    logger.info("Appended %s to tab %d.", event.email, tab_id)


def write_record(handle: SpreadsheetHandle, tab_id: int, event: LicenseEvent,
                 strategy: WriteStrategy = WriteStrategy.OVERWRITE):
    if strategy is WriteStrategy.APPEND:
        append_record(handle, tab_id, event)
    else:
        insert_record(handle, tab_id, event)


def read_records(handle: SpreadsheetHandle, tab_id: int) -> list[list[str]]:
    """Read all data rows (skip header), padded to the header width."""
    rows = _fetch_tab_rows(handle, tab_id)
    records = []
    for row in rows[1:]:
        values = [_cell_text(row, c) for c in range(config.COLUMN_COUNT)]
        records.append(values)
    return records
