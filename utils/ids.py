import uuid


def new_id() -> str:
    """Opaque identifier for accounts, transactions and rules."""
    return uuid.uuid4().hex
