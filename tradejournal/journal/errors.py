"""Errors raised at the journal's mutation boundary."""


class JournalError(Exception):
    """Base class for trade journal errors."""


class TradeValidationError(JournalError):
    """A trade request failed validation."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


class TradeNotFoundError(JournalError):
    def __init__(self, trade_id: str):
        self.trade_id = trade_id
        super().__init__(f"Trade not found: {trade_id}")


class ProfileNotFoundError(JournalError):
    def __init__(self, owner: str):
        self.owner = owner
        super().__init__(f"No profile set up for {owner}")
