"""Trade journal service layer."""

from tradejournal.journal.errors import (
    JournalError,
    ProfileNotFoundError,
    TradeNotFoundError,
    TradeValidationError,
)
from tradejournal.journal.invalidation import SUMMARY_DEPENDENCIES, Mutation, SummaryCache
from tradejournal.journal.service import TradeJournal
from tradejournal.journal.validation import validate_trade_request

__all__ = [
    "JournalError",
    "Mutation",
    "ProfileNotFoundError",
    "SUMMARY_DEPENDENCIES",
    "SummaryCache",
    "TradeJournal",
    "TradeNotFoundError",
    "TradeValidationError",
    "validate_trade_request",
]
