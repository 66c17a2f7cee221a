from dataclasses import dataclass
from typing import Optional

from models.frequency import Frequency


@dataclass(frozen=True)
class RecurringRule:
    """A scheduled transaction. Updated by replacement, never in place."""
    id: str
    description: str
    amount: float
    type: str               # 'income' | 'expense' | 'transfer'
    account_id: str
    frequency: Frequency
    next_date: str          # 'YYYY-MM-DD', earliest not-yet-materialized occurrence
    category_id: str
    to_account_id: Optional[str] = None   # transfers only
    end_date: Optional[str] = None        # inclusive
    include_in_forecast: bool = True

    @property
    def is_transfer(self) -> bool:
        return self.type == "transfer"
