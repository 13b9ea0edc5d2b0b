"""Shared helpers for CLI commands."""

import calendar
from datetime import datetime, timezone
from typing import Optional

from rich.console import Console
from rich.panel import Panel

console = Console()


def error_panel(message: str, title: str = "Error") -> None:
    console.print(Panel(
        message,
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    ))


def get_journal():
    """Build the journal from configuration, exiting if none exists."""
    from tradejournal.config import get_db_path, get_identity, load_config
    from tradejournal.db.store import JournalStore
    from tradejournal.journal import TradeJournal

    config = load_config()
    if config is None:
        error_panel(
            "[red]Configuration not found.[/red]\n\n"
            "Run [cyan]tradejournal init[/cyan] to create a config file."
        )
        raise SystemExit(1)

    store = JournalStore(get_db_path(config))
    return TradeJournal(store, get_identity(config))


def money(value: float, currency: Optional[str] = None, signed: bool = False) -> str:
    sign = "+" if signed and value > 0 else ""
    suffix = f" {currency}" if currency else ""
    return f"{sign}{value:,.2f}{suffix}"


def pnl_markup(value: float, currency: Optional[str] = None) -> str:
    """Colour a P&L figure green, red or dim."""
    if value > 0:
        color = "green"
    elif value < 0:
        color = "red"
    else:
        color = "dim"
    return f"[{color}]{money(value, currency, signed=True)}[/{color}]"


def percent(fraction: float) -> str:
    return f"{fraction * 100:.2f}%"


def to_nanos(value: datetime) -> int:
    """Epoch nanoseconds of a naive datetime read as UTC."""
    stamp = value.replace(tzinfo=timezone.utc)
    return calendar.timegm(stamp.utctimetuple()) * 1_000_000_000 + stamp.microsecond * 1_000


def currency_label(journal) -> Optional[str]:
    """Configured currency symbol, else the profile currency code."""
    from tradejournal.config import load_config

    symbol = (load_config() or {}).get("display", {}).get("currency_symbol")
    if symbol:
        return symbol
    profile = journal.get_profile()
    return profile.currency if profile else None
