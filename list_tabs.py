#!/usr/bin/env python3
"""
list_tabs.py — Print every product tab and how many license rows it holds.
"""

import argparse
import logging
import sys

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
logger = logging.getLogger("list_tabs")

import config
import sheets_client


def tab_summaries(handle) -> list[tuple[str, int]]:
    """Return (title, data row count) per tab, header excluded."""
    grid = sheets_client.fetch_grid_data(handle)
    out = []
    for s in grid.get("sheets", []):
        title = s["properties"]["title"]
        data = s.get("data") or [{}]
        rows = data[0].get("rowData", [])
        out.append((title, max(len(rows) - 1, 0)))
    return out


def main(argv=None, sheets=None):
    parser = argparse.ArgumentParser(description="List product tabs and their record counts")
    parser.add_argument("--spreadsheet-id", default=config.SPREADSHEET_ID)
    parser.add_argument("--credentials", default=None)
    args = parser.parse_args(argv)

    try:
        handle = sheets_client.open_spreadsheet(args.spreadsheet_id, args.credentials, sheets=sheets)
        summaries = tab_summaries(handle)
    except sheets_client.LicenseSheetError as e:
        logger.error("%s: %s", type(e).__name__, e)
        sys.exit(1)
    print("Tabs:")
    for title, count in summaries:
        print(f"- {title}: {count} record(s)")


if __name__ == "__main__":
    main()
