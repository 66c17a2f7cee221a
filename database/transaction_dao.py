from typing import Optional
from database.db_manager import DatabaseManager
from models.transaction import Transaction


class TransactionDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Transaction:
        return Transaction(
            id=row["id"],
            date=row["date"],
            account_id=row["account_id"],
            type=row["type"],
            amount=row["amount"],
            category_id=row["category_id"],
            description=row["description"],
            checked=bool(row["checked"]),
            is_transfer=bool(row["is_transfer"]),
            linked_transaction_id=row["linked_transaction_id"],
        )

    def get_all(self) -> list[Transaction]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM transactions ORDER BY date DESC, rowid DESC"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_account(self, account_id: str) -> list[Transaction]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM transactions WHERE account_id = ? ORDER BY date DESC, rowid DESC",
            (account_id,),
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, tx_id: str) -> Optional[Transaction]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM transactions WHERE id = ?", (tx_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def create(self, tx: Transaction) -> Transaction:
        conn = self._db.get_connection()
        conn.execute(
            """INSERT INTO transactions
               (id, date, account_id, type, amount, category_id, description,
                checked, is_transfer, linked_transaction_id)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                tx.id, tx.date, tx.account_id, tx.type, tx.amount,
                tx.category_id, tx.description,
                1 if tx.checked else 0, 1 if tx.is_transfer else 0,
                tx.linked_transaction_id,
            ),
        )
        self._db.commit()
        return tx

    def delete(self, tx_id: str):
        """Delete a transaction; a transfer takes its linked counterpart with it."""
        conn = self._db.get_connection()
        conn.execute(
            """DELETE FROM transactions
               WHERE id = ?
                  OR id = (SELECT linked_transaction_id FROM transactions
                           WHERE id = ? AND is_transfer = 1)""",
            (tx_id, tx_id),
        )
        self._db.commit()

    def delete_transfer_partners_of_account(self, account_id: str):
        """Remove the other half of every transfer touching account_id."""
        conn = self._db.get_connection()
        conn.execute(
            """DELETE FROM transactions
               WHERE account_id <> ?
                 AND id IN (SELECT linked_transaction_id FROM transactions
                            WHERE account_id = ? AND is_transfer = 1)""",
            (account_id, account_id),
        )
        self._db.commit()
