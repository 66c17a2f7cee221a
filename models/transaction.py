from dataclasses import dataclass
from typing import Optional


@dataclass
class Transaction:
    id: str
    date: str               # 'YYYY-MM-DD'
    account_id: str
    type: str               # 'income' | 'expense'
    amount: float
    category_id: str
    description: str = ""
    checked: bool = False
    is_transfer: bool = False
    linked_transaction_id: Optional[str] = None

    @property
    def signed_amount(self) -> float:
        return self.amount if self.type == "income" else -self.amount
