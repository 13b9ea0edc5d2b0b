"""Trade commands for the trade journal CLI.

Handles adding, editing, deleting and listing trades, the pre-trade
checklist and tags.
"""

import time
from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from tradejournal.cli.helpers import (
    console,
    currency_label,
    error_panel,
    get_journal,
    pnl_markup,
    to_nanos,
)
from tradejournal.journal import JournalError


TRADE_DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%d %H:%M", "%Y-%m-%d %H:%M:%S", "%Y-%m-%dT%H:%M:%S"]


def _trade_options(func):
    """Options shared by add and edit."""
    options = [
        click.option("--date", "trade_date", type=click.DateTime(formats=TRADE_DATE_FORMATS),
                     default=None, help="Trade time in UTC (YYYY-MM-DD, optionally with HH:MM[:SS])."),
        click.option("--size", type=float, required=True, help="Position size."),
        click.option("--entry", type=float, required=True, help="Entry price."),
        click.option("--exit", "exit_price", type=float, required=True, help="Exit price."),
        click.option("--sl", "stop_loss", type=float, required=True, help="Stop-loss price."),
        click.option("--tp", "take_profit", type=float, required=True, help="Take-profit price."),
        click.option("--notes", type=str, default="", help="Free text notes."),
        click.option("--tag", "tags", multiple=True, help="Tag (repeatable)."),
        click.option("--before-image", type=str, default=None, help="Reference of the pre-trade chart."),
        click.option("--after-image", type=str, default=None, help="Reference of the post-trade chart."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_request(
    asset: str,
    direction: str,
    date_ns: int,
    size: float,
    entry: float,
    exit_price: float,
    stop_loss: float,
    take_profit: float,
    notes: str,
    tags: tuple[str, ...],
    before_image: Optional[str],
    after_image: Optional[str],
):
    from tradejournal.models import TradeDirection, TradeImage, TradeRequest

    return TradeRequest(
        date=date_ns,
        direction=TradeDirection(direction.lower()),
        asset=asset.upper(),
        entry_price=entry,
        exit_price=exit_price,
        position_size=size,
        stop_loss=stop_loss,
        take_profit=take_profit,
        notes=notes,
        tags=list(dict.fromkeys(tags)),
        before_trade_image=TradeImage(reference=before_image) if before_image else None,
        after_trade_image=TradeImage(reference=after_image) if after_image else None,
    )


def _show_rejection(e: JournalError) -> None:
    errors = getattr(e, "errors", None) or [str(e)]
    error_panel("\n".join(f"• {message}" for message in errors), title="Trade rejected")
    raise SystemExit(1)


def _trade_panel(trade, currency: Optional[str], title: str) -> Panel:
    from tradejournal.analytics import classify_risk, classify_risk_reward

    risk_color = {"high": "red", "medium": "yellow", "low": "green"}[classify_risk(trade.risk_percentage)]
    rr_color = {"good": "green", "fair": "yellow", "poor": "red"}[
        classify_risk_reward(trade.risk_reward_ratio)
    ]
    return Panel(
        f"[bold]{trade.asset}[/bold] {trade.direction.value.upper()} "
        f"{trade.position_size:g} @ {trade.entry_price:g} → {trade.exit_price:g}\n\n"
        f"P&L:        {pnl_markup(trade.profit_loss, currency)}\n"
        f"Risk:       [{risk_color}]{trade.risk_percentage:.2f}%[/{risk_color}]\n"
        f"Risk/Reward: [{rr_color}]1:{trade.risk_reward_ratio:.2f}[/{rr_color}]\n\n"
        f"[dim]ID: {trade.id}[/dim]",
        title=f"[bold green]{title}[/bold green]",
        border_style="green",
    )


@click.command()
@click.argument("asset")
@click.argument("direction", type=click.Choice(["buy", "sell"], case_sensitive=False))
@_trade_options
def add(asset: str, direction: str, trade_date, size, entry, exit_price, stop_loss,
        take_profit, notes, tags, before_image, after_image) -> None:
    """Log a closed trade, timestamped now unless --date is given.

    \b
    Examples:
      tradejournal add EURUSD buy --size 10 --entry 100 --exit 110 --sl 95 --tp 120
      tradejournal add BTC sell --size 1 --entry 100 --exit 90 --sl 105 --tp 80 --tag scalp
    """
    journal = get_journal()
    date_ns = to_nanos(trade_date) if trade_date else time.time_ns()
    request = _build_request(asset, direction, date_ns, size, entry, exit_price,
                             stop_loss, take_profit, notes, tags, before_image, after_image)
    try:
        result = journal.add_trade(request)
    except JournalError as e:
        _show_rejection(e)

    currency = currency_label(journal)
    console.print(_trade_panel(result.trade, currency, "Trade Logged"))

    badge = result.updated_goals.achievement_badge
    if badge is not None:
        console.print(f"\n🏆 [bold yellow]{badge.title}[/bold yellow] {badge.description}")

    if journal.get_profile() is None:
        console.print(
            "\n[yellow]Tip:[/yellow] set up your profile with "
            "[cyan]tradejournal profile set[/cyan] to get risk metrics."
        )


@click.command()
@click.argument("trade_id")
@click.argument("asset")
@click.argument("direction", type=click.Choice(["buy", "sell"], case_sensitive=False))
@_trade_options
def edit(trade_id: str, asset: str, direction: str, trade_date, size, entry, exit_price,
         stop_loss, take_profit, notes, tags, before_image, after_image) -> None:
    """Replace the details of an existing trade.

    Without --date the trade keeps its recorded time.

    \b
    Examples:
      tradejournal edit 3f2a... EURUSD buy --size 10 --entry 100 --exit 112 --sl 95 --tp 120
    """
    journal = get_journal()
    try:
        date_ns = to_nanos(trade_date) if trade_date else journal.get_trade(trade_id).date
        request = _build_request(asset, direction, date_ns, size, entry, exit_price,
                                 stop_loss, take_profit, notes, tags, before_image, after_image)
        trade = journal.edit_trade(trade_id, request)
    except JournalError as e:
        _show_rejection(e)

    console.print(_trade_panel(trade, currency_label(journal), "Trade Updated"))


@click.command()
@click.argument("trade_id")
@click.option("--yes", "-y", is_flag=True, default=False, help="Skip confirmation.")
def delete(trade_id: str, yes: bool) -> None:
    """Delete a trade.

    \b
    Examples:
      tradejournal delete 3f2a...
    """
    journal = get_journal()
    if not yes and not click.confirm(f"Delete trade {trade_id}?"):
        console.print("[dim]Cancelled[/dim]")
        return

    try:
        journal.delete_trade(trade_id)
    except JournalError as e:
        _show_rejection(e)

    console.print(f"[green]✓[/green] Deleted trade {trade_id}")


@click.command()
@click.option("--tag", type=str, default=None, help="Only show trades with this tag.")
@click.option("--page", type=int, default=None, help="Page number (0-based), newest first.")
@click.option("--page-size", type=int, default=20, help="Trades per page.")
def trades(tag: Optional[str], page: Optional[int], page_size: int) -> None:
    """List trades with their metrics.

    \b
    Examples:
      tradejournal trades
      tradejournal trades --tag breakout
      tradejournal trades --page 0 --page-size 10
    """
    from tradejournal.analytics.bucketing import to_date

    journal = get_journal()

    if page is not None:
        entries = journal.get_trades_page(page, page_size)
        if tag:
            entries = [t for t in entries if tag in t.tags]
    else:
        entries = journal.filter_trades_by_tag(tag) if tag else journal.get_all_trades()
        entries = sorted(entries, key=lambda t: (t.date, t.sequence), reverse=True)

    if not entries:
        console.print(Panel(
            "[dim]No trades found[/dim]",
            title="[bold]Trades[/bold]",
            border_style="dim",
        ))
        return

    currency = currency_label(journal)
    table = Table(title="Trades", show_header=True, header_style="bold cyan")
    table.add_column("Date", style="dim")
    table.add_column("Asset", style="bold")
    table.add_column("Side", justify="center")
    table.add_column("Size", justify="right")
    table.add_column("Entry", justify="right")
    table.add_column("Exit", justify="right")
    table.add_column("P&L", justify="right")
    table.add_column("Risk %", justify="right")
    table.add_column("R:R", justify="right")
    table.add_column("Checklist", justify="center")
    table.add_column("Tags", max_width=20)
    table.add_column("ID", style="dim", max_width=12)

    for trade in entries:
        side_color = "green" if trade.direction.value == "buy" else "red"
        checklist = trade.checklist
        table.add_row(
            to_date(trade.date, journal.tz).isoformat(),
            trade.asset,
            f"[{side_color}]{trade.direction.value.upper()}[/{side_color}]",
            f"{trade.position_size:g}",
            f"{trade.entry_price:g}",
            f"{trade.exit_price:g}",
            pnl_markup(trade.profit_loss, currency),
            f"{trade.risk_percentage:.2f}%",
            f"1:{trade.risk_reward_ratio:.2f}",
            f"{checklist.confirmed_count}/{len(checklist.items)}",
            ", ".join(trade.tags) or "-",
            trade.id,
        )

    console.print(table)


@click.command()
@click.argument("trade_id")
@click.option("--confirm", "confirm_ids", multiple=True, help="Checklist item id to confirm.")
@click.option("--unconfirm", "unconfirm_ids", multiple=True, help="Checklist item id to clear.")
def checklist(trade_id: str, confirm_ids: tuple[str, ...], unconfirm_ids: tuple[str, ...]) -> None:
    """Show or update the pre-trade checklist of a trade.

    \b
    Examples:
      tradejournal checklist 3f2a...
      tradejournal checklist 3f2a... --confirm bias --confirm fvg
    """
    from tradejournal.models import TradeChecklist

    journal = get_journal()
    try:
        trade = journal.get_trade(trade_id)
        if confirm_ids or unconfirm_ids:
            items = [
                item.model_copy(update={"confirmed": True}) if item.id in confirm_ids
                else item.model_copy(update={"confirmed": False}) if item.id in unconfirm_ids
                else item
                for item in trade.checklist.items
            ]
            trade = journal.update_trade_checklist(trade_id, TradeChecklist(items=items))
    except JournalError as e:
        _show_rejection(e)

    lines = [
        f"{'[green]✓[/green]' if item.confirmed else '[dim]○[/dim]'} {item.description} [dim]({item.id})[/dim]"
        for item in trade.checklist.items
    ]
    console.print(Panel(
        "\n".join(lines) + f"\n\n[bold]{trade.checklist.completion_percentage:.0f}% complete[/bold]",
        title=f"[bold cyan]Checklist: {trade.asset}[/bold cyan]",
        border_style="cyan",
    ))


@click.command()
@click.argument("name", required=False)
def tags(name: Optional[str]) -> None:
    """List tags, or add NAME to the tag list.

    \b
    Examples:
      tradejournal tags
      tradejournal tags breakout
    """
    journal = get_journal()
    if name:
        journal.add_tag(name)
        console.print(f"[green]✓[/green] Added tag [bold]{name}[/bold]")
        return

    names = journal.get_tags()
    if not names:
        console.print("[dim]No tags yet[/dim]")
        return
    console.print(", ".join(names))
