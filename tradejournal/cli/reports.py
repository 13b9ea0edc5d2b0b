"""Analytics report commands for the trade journal CLI.

Calendar, weekly/monthly performance, FTMO compliance, goals and the
homepage overview.
"""

import calendar as month_calendar
from datetime import date
from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from tradejournal.cli.helpers import console, currency_label, get_journal, money, percent, pnl_markup


def _status_markup(status) -> str:
    colors = {
        "onTrack": "green",
        "overTarget": "red",
        "underTarget": "yellow",
        "atLimit": "bold red",
    }
    labels = {
        "onTrack": "On Track",
        "overTarget": "Too Aggressive",
        "underTarget": "Under Target",
        "atLimit": "At Drawdown Limit",
    }
    color = colors[status.value]
    return f"[{color}]{labels[status.value]}[/{color}]"


@click.command()
@click.option("--month", type=click.IntRange(1, 12), default=None, help="Month (1-12). Defaults to this month.")
@click.option("--year", type=int, default=None, help="Year. Defaults to this year.")
@click.option("--day", type=click.IntRange(1, 31), default=None, help="Show the trades of one day.")
def calendar(month: Optional[int], year: Optional[int], day: Optional[int]) -> None:
    """Show daily performance for a month.

    \b
    Examples:
      tradejournal calendar
      tradejournal calendar --month 3 --year 2024
      tradejournal calendar --month 3 --year 2024 --day 14
    """
    today = date.today()
    month = month or today.month
    year = year or today.year

    journal = get_journal()
    currency = currency_label(journal)

    if day is not None:
        day_trades = journal.get_trades_for_day(day, month, year)
        if not day_trades:
            console.print(f"[dim]No trades on {year}-{month:02d}-{day:02d}[/dim]")
            return
        table = Table(title=f"Trades on {year}-{month:02d}-{day:02d}", header_style="bold cyan")
        table.add_column("Asset", style="bold")
        table.add_column("Side", justify="center")
        table.add_column("P&L", justify="right")
        table.add_column("Risk %", justify="right")
        table.add_column("R:R", justify="right")
        for trade in day_trades:
            table.add_row(
                trade.asset,
                trade.direction.value.upper(),
                pnl_markup(trade.profit_loss, currency),
                f"{trade.risk_percentage:.2f}%",
                f"1:{trade.risk_reward_ratio:.2f}",
            )
        console.print(table)
        return

    from tradejournal.analytics.calendar import month_total

    days = {entry.day: entry for entry in journal.get_calendar_performance(month, year)}

    table = Table(
        title=f"{month_calendar.month_name[month]} {year}",
        show_header=True,
        header_style="bold cyan",
    )
    # Weeks start on Sunday
    weekday_names = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
    for name in weekday_names:
        table.add_column(name, justify="center", min_width=9)

    weeks = month_calendar.Calendar(firstweekday=6).monthdayscalendar(year, month)
    for week in weeks:
        cells = []
        for day_number in week:
            if day_number == 0:
                cells.append("")
            elif day_number in days:
                entry = days[day_number]
                cells.append(f"{day_number}\n{pnl_markup(entry.total_profit_loss)}\n[dim]{len(entry.trades)} tr[/dim]")
            else:
                cells.append(f"[dim]{day_number}[/dim]")
        table.add_row(*cells, end_section=True)

    console.print(table)

    total = month_total(list(days.values()))
    console.print(f"\n[bold]Month P&L:[/bold] {pnl_markup(total, currency)}  "
                  f"[dim]Trading days: {len(days)}[/dim]")


def _periods_table(title: str, periods, currency: Optional[str]) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Period", style="bold")
    table.add_column("P&L", justify="right")
    table.add_column("Trades", justify="right")
    table.add_column("Win Rate", justify="right")
    table.add_column("Return", justify="right")
    table.add_column("Avg Risk", justify="right")
    table.add_column("Avg R:R", justify="right")
    for period in periods:
        table.add_row(
            period.period,
            pnl_markup(period.profit_loss, currency),
            str(period.num_trades),
            percent(period.win_rate),
            percent(period.percentage_return),
            f"{period.average_risk_percentage:.2f}%",
            f"1:{period.average_risk_reward_ratio:.2f}",
        )
    return table


@click.command()
@click.option(
    "--period",
    type=click.Choice(["weekly", "monthly", "both"]),
    default="both",
    help="Which rollups to show.",
)
def summary(period: str) -> None:
    """Show weekly and monthly performance.

    \b
    Examples:
      tradejournal summary
      tradejournal summary --period monthly
    """
    journal = get_journal()
    currency = currency_label(journal)
    result = journal.get_performance_summary()

    console.print(Panel(
        f"Total P&L:     {pnl_markup(result.total_profit_loss, currency)}\n"
        f"Total Trades:  {result.total_trades}\n"
        f"Win Rate:      {percent(result.average_win_rate)}\n"
        f"Total Return:  {percent(result.cumulative_percentage_return)}\n"
        f"Avg Risk:      {result.average_risk_percentage:.2f}%\n"
        f"Avg R:R:       1:{result.average_risk_reward_ratio:.2f}",
        title="[bold cyan]Performance Summary[/bold cyan]",
        border_style="cyan",
    ))

    if period in ("weekly", "both") and result.weekly_performance:
        console.print(_periods_table("Weekly Performance", result.weekly_performance, currency))
    if period in ("monthly", "both") and result.monthly_performance:
        console.print(_periods_table("Monthly Performance", result.monthly_performance, currency))


def _ftmo_panel(analytics, balance: float, currency: Optional[str]) -> Panel:
    from tradejournal.analytics.ftmo import MAX_CONSISTENCY_RATE, MAX_DAILY_LOSS_FRACTION

    def mark(ok: bool) -> str:
        return "[green]✓[/green]" if ok else "[red]✗[/red]"

    loss_limit = -MAX_DAILY_LOSS_FRACTION * balance
    overall = "[bold green]PASS[/bold green]" if analytics.overall_compliance else "[bold red]FAIL[/bold red]"
    return Panel(
        f"{mark(analytics.max_daily_loss >= loss_limit)} Max Daily Loss:   "
        f"{pnl_markup(analytics.max_daily_loss, currency)} [dim](limit {money(loss_limit, currency)})[/dim]\n"
        f"  Max Daily Profit: {pnl_markup(analytics.max_daily_profit, currency)}\n"
        f"{mark(analytics.profit_target_progress >= 1.0)} Profit Target:    "
        f"{percent(analytics.profit_target_progress)} [dim](goal 10% of balance)[/dim]\n"
        f"{mark(analytics.consistency_rate <= MAX_CONSISTENCY_RATE)} Consistency:      "
        f"{analytics.consistency_rate:.3f} [dim](target ≤ {MAX_CONSISTENCY_RATE:.3f})[/dim]\n"
        f"  Avg Risk:         {analytics.average_risk_percentage:.2f}%\n"
        f"  Avg R:R:          1:{analytics.average_risk_reward_ratio:.2f}\n\n"
        f"Overall: {overall}",
        title="[bold cyan]FTMO Analytics[/bold cyan]",
        border_style="cyan",
    )


@click.command()
def ftmo() -> None:
    """Evaluate the journal against FTMO-style rules.

    \b
    Examples:
      tradejournal ftmo
    """
    journal = get_journal()
    profile = journal.get_profile()
    if profile is None:
        console.print("[yellow]Set up your profile to get balance-based limits.[/yellow]")
    balance = profile.account_balance if profile else 0.0
    console.print(_ftmo_panel(journal.get_ftmo_analytics(), balance, currency_label(journal)))


@click.command()
def goals() -> None:
    """Show weekly/monthly goal progress and drawdown.

    \b
    Examples:
      tradejournal goals
    """
    journal = get_journal()
    profile = journal.get_profile()
    if profile is None:
        console.print(Panel(
            "[dim]No profile yet.[/dim]\n\n"
            "Run [cyan]tradejournal profile set[/cyan] to set your goals.",
            title="[bold]Performance Goals[/bold]",
            border_style="dim",
        ))
        return

    currency = currency_label(journal)
    result = journal.get_performance_goals_summary()

    lines = []
    if result.weekly_profit_target > 0:
        lines.append(
            f"Weekly:   {pnl_markup(result.current_week_profit, currency)} of "
            f"{money(result.weekly_profit_target, currency)} "
            f"({percent(result.weekly_progress)}) {_status_markup(result.weekly_goal_status)}"
        )
    else:
        lines.append("[dim]Weekly:   no target set[/dim]")

    if result.monthly_profit_goal > 0:
        lines.append(
            f"Monthly:  {money(result.monthly_profit_progress * result.monthly_profit_goal, currency)} of "
            f"{money(result.monthly_profit_goal, currency)} ({percent(result.monthly_profit_progress)})"
        )
    else:
        lines.append("[dim]Monthly:  no goal set[/dim]")

    if result.max_drawdown_limit > 0:
        lines.append(
            f"Drawdown: {percent(result.current_drawdown)} of {percent(result.max_drawdown_limit)} limit"
        )
    else:
        lines.append("[dim]Drawdown: no limit set[/dim]")

    lines.append(f"\nOverall:  {_status_markup(result.goal_status)}")

    badge = result.achievement_badge
    if badge is not None:
        lines.append(f"\n🏆 [bold yellow]{badge.title}[/bold yellow]\n[dim]{badge.description}[/dim]")

    console.print(Panel(
        "\n".join(lines),
        title="[bold cyan]Performance Goals[/bold cyan]",
        border_style="cyan",
    ))


@click.command()
def home() -> None:
    """Dashboard overview: P&L, win rate, week change, equity and FTMO.

    \b
    Examples:
      tradejournal home
    """
    journal = get_journal()
    profile = journal.get_profile()
    currency = currency_label(journal)
    result = journal.get_homepage_summary()
    week = result.last_week_change

    sparks = "▁▂▃▄▅▆▇█"
    curve = result.mini_equity_curve
    if curve:
        low, high = min(curve), max(curve)
        spread = (high - low) or 1.0
        sparkline = "".join(sparks[int((value - low) / spread * (len(sparks) - 1))] for value in curve)
    else:
        sparkline = "[dim]no trades yet[/dim]"

    console.print(Panel(
        f"Total P&L:   {pnl_markup(result.total_profit_loss, currency)}\n"
        f"Win Rate:    {percent(result.win_rate)}\n"
        f"This Week:   {pnl_markup(week.profit_loss, currency)} "
        f"[dim]({money(week.comparison_to_previous_week, currency, signed=True)} vs last week, "
        f"{percent(week.percentage_change)})[/dim]\n"
        f"Avg Risk:    {result.average_risk_percentage:.2f}%\n"
        f"Avg R:R:     1:{result.average_risk_reward_ratio:.2f}\n"
        f"Equity:      {sparkline}",
        title="[bold cyan]Overview[/bold cyan]",
        border_style="cyan",
    ))

    balance = profile.account_balance if profile else 0.0
    console.print(_ftmo_panel(result.ftmo_analytics, balance, currency))

    badge = journal.get_performance_goals_summary().achievement_badge
    if badge is not None:
        console.print(f"🏆 [bold yellow]{badge.title}[/bold yellow] {badge.description}")


@click.command()
def stats() -> None:
    """Show headline trade statistics.

    \b
    Examples:
      tradejournal stats
    """
    journal = get_journal()
    currency = currency_label(journal)
    result = journal.get_trade_statistics()

    best = pnl_markup(result.best_trade, currency) if result.best_trade is not None else "-"
    worst = pnl_markup(result.worst_trade, currency) if result.worst_trade is not None else "-"
    console.print(Panel(
        f"Trades:       {result.total_trades} "
        f"[dim](wins {result.winning_trades}, losses {result.losing_trades})[/dim]\n"
        f"Total P&L:    {pnl_markup(result.total_profit, currency)} "
        f"[dim]({result.percentage_profit_loss:.2f}% of balance)[/dim]\n"
        f"Win Rate:     {percent(result.win_rate)}\n"
        f"Best Trade:   {best}\n"
        f"Worst Trade:  {worst}",
        title="[bold cyan]Statistics[/bold cyan]",
        border_style="cyan",
    ))
