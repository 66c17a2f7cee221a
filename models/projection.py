from dataclasses import dataclass, field
from datetime import date

from models.recurring_rule import RecurringRule
from models.transaction import Transaction


@dataclass(frozen=True)
class DailyPoint:
    date: date
    balances: dict[str, float]   # account_id -> running balance
    total: float


@dataclass
class MaterializeResult:
    new_transactions: list[Transaction] = field(default_factory=list)
    updated_rules: list[RecurringRule] = field(default_factory=list)
    retired_rule_ids: list[str] = field(default_factory=list)
    # In-memory collection for the rest of the app: new (newest first) then existing
    transactions: list[Transaction] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.new_transactions or self.updated_rules or self.retired_rule_ids)

    def summary(self) -> str:
        """One-line startup notice, e.g. '3 scheduled transactions were added.'"""
        count = len(self.new_transactions)
        if count == 1:
            text = "1 scheduled transaction was added."
        else:
            text = f"{count} scheduled transactions were added."
        retired = len(self.retired_rule_ids)
        if retired:
            text += f" {retired} one-time schedule{'s' if retired != 1 else ''} completed."
        return text
