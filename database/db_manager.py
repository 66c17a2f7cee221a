import logging
import os
import sqlite3
import uuid
from contextlib import contextmanager
from utils.constants import (
    DB_FILE, DEFAULT_CATEGORIES, DEFAULT_ACCOUNT_NAME, TRANSFER_CATEGORY_ID,
)

logger = logging.getLogger(__name__)


class DatabaseManager:
    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or DB_FILE
        self._conn: sqlite3.Connection | None = None
        self._tx_depth = 0

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA foreign_keys = ON")
            self._conn.execute("PRAGMA journal_mode = WAL")
        return self._conn

    def initialize(self):
        """Create schema and seed defaults."""
        conn = self.get_connection()
        self._create_schema(conn)
        self._migrate_schema(conn)
        self._seed_defaults(conn)
        conn.commit()

    # ── Transactions ─────────────────────────────────────────────────────────

    @contextmanager
    def transaction(self):
        """Group DAO writes into one atomic unit: commit on success, rollback on error.

        Nested blocks join the outermost one.
        """
        conn = self.get_connection()
        self._tx_depth += 1
        try:
            yield conn
        except BaseException:
            self._tx_depth -= 1
            if self._tx_depth == 0:
                conn.rollback()
            raise
        else:
            self._tx_depth -= 1
            if self._tx_depth == 0:
                conn.commit()

    def commit(self):
        """Commit pending writes unless a transaction() block is open."""
        if self._tx_depth == 0:
            self.get_connection().commit()

    # ── Schema ───────────────────────────────────────────────────────────────

    def _migrate_schema(self, conn: sqlite3.Connection):
        """Idempotent ALTER TABLE for columns added after initial release."""
        cols = {row[1] for row in conn.execute("PRAGMA table_info(recurring_rules)").fetchall()}
        if "include_in_forecast" not in cols:
            conn.execute(
                "ALTER TABLE recurring_rules ADD COLUMN include_in_forecast INTEGER NOT NULL DEFAULT 1"
            )
        # Databases created before transfers existed lack the reserved category
        has_categories = conn.execute("SELECT 1 FROM categories LIMIT 1").fetchone()
        has_transfer = conn.execute(
            "SELECT 1 FROM categories WHERE id = ?", (TRANSFER_CATEGORY_ID,)
        ).fetchone()
        if has_categories and not has_transfer:
            logger.info("Adding missing '%s' category", TRANSFER_CATEGORY_ID)
            cat = next(c for c in DEFAULT_CATEGORIES if c["id"] == TRANSFER_CATEGORY_ID)
            conn.execute(
                "INSERT INTO categories(id, name, icon, color) VALUES (?, ?, ?, ?)",
                (cat["id"], cat["name"], cat["icon"], cat["color"]),
            )

    def _create_schema(self, conn: sqlite3.Connection):
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS accounts (
                id              TEXT PRIMARY KEY,
                name            TEXT NOT NULL UNIQUE,
                account_type    TEXT NOT NULL DEFAULT 'current',
                initial_balance REAL NOT NULL DEFAULT 0.0,
                color           TEXT NOT NULL DEFAULT '#2196F3',
                icon            TEXT NOT NULL DEFAULT 'Wallet'
            );

            CREATE TABLE IF NOT EXISTS categories (
                id    TEXT PRIMARY KEY,
                name  TEXT NOT NULL,
                icon  TEXT NOT NULL DEFAULT 'Tag',
                color TEXT NOT NULL DEFAULT '#888888'
            );

            CREATE TABLE IF NOT EXISTS recurring_rules (
                id            TEXT PRIMARY KEY,
                description   TEXT NOT NULL DEFAULT '',
                amount        REAL NOT NULL CHECK(amount >= 0),
                type          TEXT NOT NULL CHECK(type IN ('income','expense','transfer')),
                account_id    TEXT NOT NULL REFERENCES accounts(id) ON DELETE CASCADE,
                to_account_id TEXT REFERENCES accounts(id) ON DELETE CASCADE,
                frequency     TEXT NOT NULL,
                next_date     TEXT NOT NULL,
                end_date      TEXT,
                category_id   TEXT NOT NULL
            );

            CREATE TABLE IF NOT EXISTS transactions (
                id                    TEXT PRIMARY KEY,
                date                  TEXT NOT NULL,
                account_id            TEXT NOT NULL REFERENCES accounts(id) ON DELETE CASCADE,
                type                  TEXT NOT NULL CHECK(type IN ('income','expense')),
                amount                REAL NOT NULL CHECK(amount >= 0),
                category_id           TEXT NOT NULL,
                description           TEXT NOT NULL DEFAULT '',
                checked               INTEGER NOT NULL DEFAULT 0,
                is_transfer           INTEGER NOT NULL DEFAULT 0,
                linked_transaction_id TEXT
            );

            CREATE INDEX IF NOT EXISTS idx_transactions_account_id ON transactions(account_id);
            CREATE INDEX IF NOT EXISTS idx_transactions_date       ON transactions(date);
            CREATE INDEX IF NOT EXISTS idx_transactions_linked     ON transactions(linked_transaction_id);
            CREATE INDEX IF NOT EXISTS idx_recurring_next_date     ON recurring_rules(next_date);

            CREATE TABLE IF NOT EXISTS app_settings (
                key   TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );
        """)

    def _seed_defaults(self, conn: sqlite3.Connection):
        # Default settings
        defaults = [
            ("appearance_mode", "system"),
            ("currency_symbol", "$"),
            ("date_format", "YYYY-MM-DD"),
        ]
        for key, value in defaults:
            conn.execute(
                "INSERT OR IGNORE INTO app_settings(key, value) VALUES (?, ?)",
                (key, value),
            )

        # Default categories, including the reserved transfer category
        for cat in DEFAULT_CATEGORIES:
            conn.execute(
                """INSERT OR IGNORE INTO categories(id, name, icon, color)
                   VALUES (?, ?, ?, ?)""",
                (cat["id"], cat["name"], cat["icon"], cat["color"]),
            )

        # Default account, only for a brand new database
        has_account = conn.execute("SELECT 1 FROM accounts LIMIT 1").fetchone()
        if has_account is None:
            conn.execute(
                "INSERT INTO accounts(id, name) VALUES (?, ?)",
                (uuid.uuid4().hex, DEFAULT_ACCOUNT_NAME),
            )

    # ── Settings ─────────────────────────────────────────────────────────────

    def get_setting(self, key: str, default: str = "") -> str:
        conn = self.get_connection()
        row = conn.execute(
            "SELECT value FROM app_settings WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else default

    def set_setting(self, key: str, value: str):
        conn = self.get_connection()
        conn.execute(
            "INSERT OR REPLACE INTO app_settings(key, value) VALUES (?, ?)",
            (key, value),
        )
        self.commit()

    @staticmethod
    def open(db_folder: str | None = None) -> "DatabaseManager":
        """Startup factory: opens (creating if needed) the ledger DB.

        db_folder: if provided, the DB file is stored in that directory instead of CWD.
        """
        if db_folder:
            os.makedirs(db_folder, exist_ok=True)
            path = os.path.join(db_folder, DB_FILE)
        else:
            path = DB_FILE
        logger.info("Opening database %s", path)
        db = DatabaseManager(path)
        db.initialize()
        return db

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None
