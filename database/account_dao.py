from typing import Optional
from database.db_manager import DatabaseManager
from models.account import Account


class AccountDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Account:
        return Account(
            id=row["id"],
            name=row["name"],
            account_type=row["account_type"],
            initial_balance=row["initial_balance"],
            color=row["color"],
            icon=row["icon"],
        )

    def get_all(self) -> list[Account]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM accounts ORDER BY name"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, account_id: str) -> Optional[Account]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM accounts WHERE id = ?", (account_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def get_by_name(self, name: str) -> Optional[Account]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM accounts WHERE name = ?", (name,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def create(self, account: Account) -> Account:
        conn = self._db.get_connection()
        conn.execute(
            """INSERT INTO accounts(id, name, account_type, initial_balance, color, icon)
               VALUES (?, ?, ?, ?, ?, ?)""",
            (
                account.id, account.name, account.account_type,
                account.initial_balance, account.color, account.icon,
            ),
        )
        self._db.commit()
        return self.get_by_id(account.id)

    def update(self, account: Account) -> Account:
        conn = self._db.get_connection()
        conn.execute(
            """UPDATE accounts SET name = ?, account_type = ?, initial_balance = ?,
                   color = ?, icon = ?
               WHERE id = ?""",
            (
                account.name, account.account_type, account.initial_balance,
                account.color, account.icon, account.id,
            ),
        )
        self._db.commit()
        return self.get_by_id(account.id)

    def delete(self, account_id: str):
        """Transactions and recurring rules on the account go with it (ON DELETE CASCADE)."""
        conn = self._db.get_connection()
        conn.execute("DELETE FROM accounts WHERE id = ?", (account_id,))
        self._db.commit()
