"""Pre-DB bootstrap configuration. Zero imports from the rest of the app.

Stores user preferences that must be known before opening the DB or
configuring logging (db_folder, log_level, horizon_days).
Config lives in ~/.recurring_ledger/config.json to avoid a bootstrapping problem.
"""
import json
import os
from pathlib import Path

CONFIG_DIR = Path.home() / ".recurring_ledger"
CONFIG_FILE = CONFIG_DIR / "config.json"

DEFAULTS = {
    "db_folder": None,
    "log_level": "INFO",
    "horizon_days": 365,
}


def load_config(path: Path | None = None) -> dict:
    """Returns DEFAULTS merged with the file contents; never raises."""
    config = dict(DEFAULTS)
    try:
        with open(path or CONFIG_FILE, "r", encoding="utf-8") as f:
            stored = json.load(f)
    except (OSError, ValueError):
        return config
    if isinstance(stored, dict):
        config.update(stored)
    return config


def save_config(config: dict, path: Path | None = None) -> None:
    """Creates the config dir if needed; atomic write via .tmp + os.replace()."""
    target = Path(path or CONFIG_FILE)
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp = target.with_suffix(".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        os.replace(tmp, target)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def get_db_folder(config: dict | None = None) -> str | None:
    """Return config["db_folder"] or None if not set."""
    return (config or load_config()).get("db_folder")


def get_horizon_days(config: dict | None = None) -> int:
    """Projection horizon in days; falls back to the default on bad values."""
    value = (config or load_config()).get("horizon_days", DEFAULTS["horizon_days"])
    try:
        days = int(value)
    except (TypeError, ValueError):
        return DEFAULTS["horizon_days"]
    return days if days > 0 else DEFAULTS["horizon_days"]
