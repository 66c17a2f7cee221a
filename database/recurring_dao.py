from typing import Optional
from database.db_manager import DatabaseManager
from models.frequency import Frequency
from models.recurring_rule import RecurringRule


class RecurringDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> RecurringRule:
        return RecurringRule(
            id=row["id"],
            description=row["description"],
            amount=row["amount"],
            type=row["type"],
            account_id=row["account_id"],
            frequency=Frequency.parse(row["frequency"]),
            next_date=row["next_date"],
            category_id=row["category_id"],
            to_account_id=row["to_account_id"],
            end_date=row["end_date"],
            include_in_forecast=bool(row["include_in_forecast"]),
        )

    def get_all(self) -> list[RecurringRule]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM recurring_rules ORDER BY next_date, description"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, rule_id: str) -> Optional[RecurringRule]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM recurring_rules WHERE id = ?", (rule_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def create(self, rule: RecurringRule) -> RecurringRule:
        conn = self._db.get_connection()
        conn.execute(
            """INSERT INTO recurring_rules
               (id, description, amount, type, account_id, to_account_id,
                frequency, next_date, end_date, category_id, include_in_forecast)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                rule.id, rule.description, rule.amount, rule.type,
                rule.account_id, rule.to_account_id, rule.frequency.value,
                rule.next_date, rule.end_date, rule.category_id,
                1 if rule.include_in_forecast else 0,
            ),
        )
        self._db.commit()
        return self.get_by_id(rule.id)

    def update(self, rule: RecurringRule) -> RecurringRule:
        conn = self._db.get_connection()
        conn.execute(
            """UPDATE recurring_rules SET
               description=?, amount=?, type=?, account_id=?, to_account_id=?,
               frequency=?, next_date=?, end_date=?, category_id=?,
               include_in_forecast=?
               WHERE id=?""",
            (
                rule.description, rule.amount, rule.type, rule.account_id,
                rule.to_account_id, rule.frequency.value, rule.next_date,
                rule.end_date, rule.category_id,
                1 if rule.include_in_forecast else 0, rule.id,
            ),
        )
        self._db.commit()
        return rule

    def delete(self, rule_id: str):
        conn = self._db.get_connection()
        conn.execute("DELETE FROM recurring_rules WHERE id = ?", (rule_id,))
        self._db.commit()
