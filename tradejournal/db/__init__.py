"""Persistence for the trade journal."""

from tradejournal.db.store import JournalStore

__all__ = ["JournalStore"]
