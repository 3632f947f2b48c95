#!/usr/bin/env python3
"""
setup_sheet.py — One-time script to create product tabs ahead of the first event.
Each tab gets the styled header row.

Usage:
    python setup_sheet.py "Kubeform Community" "Stash Enterprise"
"""

import argparse
import logging
import sys

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
logger = logging.getLogger("setup_sheet")

import config
import license_sheet
import sheets_client


def main(argv=None, sheets=None):
    parser = argparse.ArgumentParser(description="Create product tabs with headers")
    parser.add_argument("products", nargs="+", help="Product names (tab titles)")
    parser.add_argument("--spreadsheet-id", default=config.SPREADSHEET_ID)
    parser.add_argument("--credentials", default=None)
    args = parser.parse_args(argv)

    logger.info("Connecting to Google Sheets...")
    try:
        handle = sheets_client.open_spreadsheet(args.spreadsheet_id, args.credentials, sheets=sheets)
        for product in args.products:
            tab_id = license_sheet.ensure_tab(handle, product)
            logger.info("Tab '%s' ready (id=%d).", product, tab_id)
    except sheets_client.LicenseSheetError as e:
        logger.error("%s: %s", type(e).__name__, e)
        sys.exit(1)
    logger.info("Done! Check your Google Sheet.")


if __name__ == "__main__":
    main()
