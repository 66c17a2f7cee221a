def to_cents(amount: float) -> int:
    """Convert a decimal amount to integer minor units, rounding half away from zero."""
    cents = abs(amount) * 100
    rounded = int(cents + 0.5)
    return rounded if amount >= 0 else -rounded


def from_cents(cents: int) -> float:
    return cents / 100


def format_currency(amount: float, symbol: str = "$") -> str:
    """Format a float as currency string, e.g. '$1,234.56'."""
    if amount < 0:
        return f"-{symbol}{abs(amount):,.2f}"
    return f"{symbol}{amount:,.2f}"
