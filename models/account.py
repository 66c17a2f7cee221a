from dataclasses import dataclass


ACCOUNT_TYPE_LABELS = {
    "current": "Current",
    "savings": "Savings",
    "cash": "Cash",
    "investment": "Investment",
}


@dataclass
class Account:
    id: str
    name: str
    account_type: str = "current"
    initial_balance: float = 0.0
    color: str = "#2196F3"
    icon: str = "Wallet"

    @property
    def type_label(self) -> str:
        return ACCOUNT_TYPE_LABELS.get(self.account_type, self.account_type.title())
