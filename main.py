import logging
import os
import sqlite3
import sys
import customtkinter as ctk

# Ensure project root is on sys.path when run directly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from database.db_manager import DatabaseManager
from database.account_dao import AccountDAO
from database.transaction_dao import TransactionDAO
from database.category_dao import CategoryDAO
from database.recurring_dao import RecurringDAO

from services.account_service import AccountService
from services.recurring_service import RecurringService
from services.forecast_service import ForecastService

from ui.app_window import AppWindow
from utils.app_config import CONFIG_DIR, load_config, get_db_folder, get_horizon_days
from utils.constants import LOG_FILE
from utils.log_setup import configure_logging

logger = logging.getLogger("recurring_ledger")


def main():
    # ── Bootstrap: pre-DB config and logging ─────────────────────────────────
    config = load_config()
    configure_logging(config.get("log_level", "INFO"), CONFIG_DIR / LOG_FILE)

    # ── Database ─────────────────────────────────────────────────────────────
    db = DatabaseManager.open(db_folder=get_db_folder(config))

    # ── DAOs ─────────────────────────────────────────────────────────────────
    account_dao = AccountDAO(db)
    tx_dao = TransactionDAO(db)
    category_dao = CategoryDAO(db)
    recurring_dao = RecurringDAO(db)

    # ── Services ─────────────────────────────────────────────────────────────
    account_svc = AccountService(account_dao, tx_dao, db)
    recurring_svc = RecurringService(recurring_dao, tx_dao, account_dao, db)
    forecast_svc = ForecastService(
        account_dao, tx_dao, recurring_dao, horizon_days=get_horizon_days(config)
    )

    # ── Apply due scheduled transactions ─────────────────────────────────────
    # A failure leaves the app usable; unapplied occurrences are picked up next start.
    startup_result = None
    startup_error = None
    try:
        startup_result = recurring_svc.apply_due_rules_once()
    except sqlite3.Error as exc:
        logger.exception("Applying scheduled transactions failed")
        startup_error = str(exc)

    # ── Appearance ───────────────────────────────────────────────────────────
    ctk.set_appearance_mode(db.get_setting("appearance_mode", "system"))
    ctk.set_default_color_theme("blue")

    # ── Launch UI ────────────────────────────────────────────────────────────
    app = AppWindow(
        account_service=account_svc,
        recurring_service=recurring_svc,
        forecast_service=forecast_svc,
        category_dao=category_dao,
        startup_result=startup_result,
        startup_error=startup_error,
        date_format=db.get_setting("date_format", "YYYY-MM-DD"),
        currency_symbol=db.get_setting("currency_symbol", "$"),
    )

    def on_close():
        db.close()
        app.destroy()

    app.protocol("WM_DELETE_WINDOW", on_close)
    app.mainloop()


if __name__ == "__main__":
    main()
