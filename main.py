"""
main.py — Record one license registration event in the Google Sheet.
CLI entry point: resolve the product tab, write the row, exit.

Usage:
    python main.py --name "Alice" --email a@x.com --product Acme --cluster-id cid-1
    python main.py --event-file event.yaml --strategy append
"""

import argparse
import logging
import sys

import config
import license_sheet
import sheets_client
from license_event import build_event
from license_sheet import WriteStrategy
from sheets_client import LicenseSheetError

# ── Logging setup ─────────────────────────────────────────────────
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[
        logging.StreamHandler(sys.stdout),
        logging.FileHandler(config.LOG_DIR / "license_recorder.log", encoding="utf-8"),
    ],
)
logger = logging.getLogger("license-recorder")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Record a license registration event in the product's Google Sheet tab",
    )
    parser.add_argument("--name", help="Licensee name")
    parser.add_argument("--email", help="Licensee email")
    parser.add_argument("--product", help="Product name (one tab per product)")
    parser.add_argument("--cluster-id", dest="cluster_id", help="Cluster ID")
    parser.add_argument(
        "--timestamp",
        help="RFC3339 timestamp (default: now, UTC)",
    )
    parser.add_argument(
        "--event-file",
        help="YAML or JSON file with name/email/product/cluster_id/timestamp",
    )
    parser.add_argument(
        "--strategy",
        choices=[s.value for s in WriteStrategy],
        default=config.DEFAULT_STRATEGY,
        help="overwrite: next empty row with incrementing SL; append: SL always 1",
    )
    parser.add_argument(
        "--spreadsheet-id",
        default=config.SPREADSHEET_ID,
        help="Target spreadsheet ID",
    )
    parser.add_argument(
        "--credentials",
        default=None,
        help="Service account JSON (default: GOOGLE_APPLICATION_CREDENTIALS)",
    )
    parser.add_argument(
        "--show",
        action="store_true",
        help="Print the tab's records after writing",
    )
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser


def record_event(event, spreadsheet_id: str, strategy: WriteStrategy,
                 credentials_file: str | None = None, sheets=None):
    """Open the spreadsheet, resolve the product tab and write one row."""
    handle = sheets_client.open_spreadsheet(spreadsheet_id, credentials_file, sheets=sheets)
    tab_id = license_sheet.ensure_tab(handle, event.product)
    license_sheet.write_record(handle, tab_id, event, strategy)
    return handle, tab_id


def main(argv=None, sheets=None):
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.strategy not in {s.value for s in WriteStrategy}:
        logger.error("Unknown write strategy: %s", args.strategy)
        sys.exit(2)
    strategy = WriteStrategy(args.strategy)

    try:
        event = build_event(
            {
                "name": args.name,
                "email": args.email,
                "product": args.product,
                "cluster_id": args.cluster_id,
                "timestamp": args.timestamp,
            },
            event_file=args.event_file,
        )
        logger.info(
            "Recording %s for product '%s' (strategy=%s).",
            event.email, event.product, strategy.value,
        )
        handle, tab_id = record_event(
            event, args.spreadsheet_id, strategy,
            credentials_file=args.credentials, sheets=sheets,
        )
        if args.show:
            for record in license_sheet.read_records(handle, tab_id):
                print("\t".join(record))
    except LicenseSheetError as e:
        logger.error("%s: %s", type(e).__name__, e)
        sys.exit(1)

    logger.info("Done.")


if __name__ == "__main__":
    main()
