"""
config.py — Central configuration for the license registration recorder.
Loads credentials from .env and defines constants.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# ── Load environment ──────────────────────────────────────────────
load_dotenv(Path(__file__).parent / ".env")

# ── Credentials ───────────────────────────────────────────────────
# Share the spreadsheet with the service account email.
SERVICE_ACCOUNT_FILE = os.getenv(
    "GOOGLE_APPLICATION_CREDENTIALS",
    os.getenv("SERVICE_ACCOUNT_FILE", str(Path(__file__).parent / "service_account.json")),
)

# ── Google Sheet ──────────────────────────────────────────────────
SPREADSHEET_ID = os.getenv(
    "SPREADSHEET_ID", "1oVgOU17GRh9CPLVG2cwMbLygMH1sGMpu9W6Iqogx-G8"
)
SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

# ── Tab layout (one tab per product) ──────────────────────────────
HEADERS = [
    "SL",         # A  sequence number
    "Name",       # B
    "Email",      # C
    "ClusterID",  # D
    "Time",       # E
]
HEADER_LITERAL = HEADERS[0]
COLUMN_COUNT = len(HEADERS)

# Header cell style: bold text on RGB (239, 226, 149).
HEADER_BACKGROUND = {
    "red": 239 / 255,
    "green": 226 / 255,
    "blue": 149 / 255,
    "alpha": 1,
}

# ── Row writing ───────────────────────────────────────────────────
# "overwrite" computes SL from the row above, "append" always writes "1".
DEFAULT_STRATEGY = os.getenv("WRITE_STRATEGY", "overwrite").strip().lower()

# ── Logging ───────────────────────────────────────────────────────
LOG_DIR = Path(os.getenv("LOG_DIR", str(Path(__file__).parent / "logs")))
LOG_DIR.mkdir(parents=True, exist_ok=True)
