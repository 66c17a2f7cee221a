from typing import Optional
from database.db_manager import DatabaseManager
from models.category import Category


class CategoryDAO:
    def __init__(self, db: DatabaseManager):
        self._db = db

    def _row_to_model(self, row) -> Category:
        return Category(
            id=row["id"],
            name=row["name"],
            icon=row["icon"],
            color=row["color"],
        )

    def get_all(self) -> list[Category]:
        conn = self._db.get_connection()
        rows = conn.execute(
            "SELECT * FROM categories ORDER BY name"
        ).fetchall()
        return [self._row_to_model(r) for r in rows]

    def get_by_id(self, category_id: str) -> Optional[Category]:
        conn = self._db.get_connection()
        row = conn.execute(
            "SELECT * FROM categories WHERE id = ?", (category_id,)
        ).fetchone()
        return self._row_to_model(row) if row else None

    def get_names(self) -> dict[str, str]:
        """{category_id: name} for label lookups."""
        return {c.id: c.name for c in self.get_all()}
