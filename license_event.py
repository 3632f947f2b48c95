"""
license_event.py — The license registration record written to the sheet.
Events come from CLI values, an event file (YAML or JSON) or LICENSE_* env vars.
"""

import logging
import os
from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from pathlib import Path

import yaml

from sheets_client import DataError

logger = logging.getLogger(__name__)

ENV_PREFIX = "LICENSE_"
REQUIRED_FIELDS = ("name", "email", "product", "cluster_id")


def now_rfc3339() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass(frozen=True)
class LicenseEvent:
    name: str
    email: str
    product: str
    cluster_id: str
    timestamp: str = field(default_factory=now_rfc3339)

    def __post_init__(self):
        missing = [f for f in REQUIRED_FIELDS if not str(getattr(self, f) or "").strip()]
        if missing:
            raise DataError(f"License event is missing: {', '.join(missing)}")

    def as_row(self, sequence: str) -> list[str]:
        """Return the five sheet columns in header order."""
        return [sequence, self.name, self.email, self.cluster_id, self.timestamp]


def load_event_file(path: str | Path) -> dict:
    """Read event fields from a YAML (or JSON) mapping."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise DataError(f"Cannot read event file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise DataError(f"Invalid event file {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise DataError(f"Event file {path} must contain a mapping, got {type(data).__name__}")
    out = {}
    for key, value in data.items():
        if value is None:
            continue
        # Unquoted YAML timestamps load as datetime.
        if isinstance(value, datetime):
            if value.tzinfo is None:
                value = value.replace(tzinfo=timezone.utc)
            value = value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
        out[str(key)] = str(value)
    return out


def event_from_env(environ=None) -> dict:
    """Collect LICENSE_NAME, LICENSE_EMAIL, ... from the environment."""
    environ = os.environ if environ is None else environ
    out = {}
    for f in fields(LicenseEvent):
        value = environ.get(ENV_PREFIX + f.name.upper(), "").strip()
        if value:
            out[f.name] = value
    return out


def build_event(cli_values: dict | None = None, event_file: str | None = None,
                environ=None) -> LicenseEvent:
    """
    Merge event sources and build a LicenseEvent.
    Precedence: CLI values > event file > environment.
    """
    merged = event_from_env(environ)
    if event_file:
        merged.update(load_event_file(event_file))
    for key, value in (cli_values or {}).items():
        if value not in (None, ""):
            merged[key] = value

    known = {f.name for f in fields(LicenseEvent)}
    unknown = sorted(set(merged) - known)
    if unknown:
        logger.warning("Ignoring unknown event fields: %s", ", ".join(unknown))
    kwargs = {k: v for k, v in merged.items() if k in known}
    for name in REQUIRED_FIELDS:
        kwargs.setdefault(name, "")
    return LicenseEvent(**kwargs)
