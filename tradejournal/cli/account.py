"""Account commands: configuration file and user profile."""

from typing import Optional

import click
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from tradejournal.cli.helpers import console, error_panel, get_journal, money, percent


@click.command()
@click.option("--force", is_flag=True, default=False, help="Overwrite an existing config file.")
def init(force: bool) -> None:
    """Create a template configuration file.

    \b
    Examples:
      tradejournal init
      tradejournal init --force
    """
    from tradejournal.config import create_template_config, get_config_path

    config_path = get_config_path()
    if config_path.exists() and not force:
        console.print(f"[yellow]Config already exists:[/yellow] {config_path}")
        return

    path = create_template_config(config_path)
    console.print(Panel(
        f"Configuration written to [cyan]{path}[/cyan]\n\n"
        "Next, run [cyan]tradejournal profile set --name NAME --balance AMOUNT[/cyan].",
        title="[bold green]Initialized[/bold green]",
        border_style="green",
    ))


@click.group()
def profile() -> None:
    """Show or update your profile and performance goals.

    \b
    Examples:
      tradejournal profile show
      tradejournal profile set --name Alex --balance 10000 --currency USD
      tradejournal profile set --weekly-target 250 --max-drawdown 0.1
    """


@profile.command("show")
def show_profile() -> None:
    """Display the current profile."""
    journal = get_journal()
    current = journal.get_profile()

    if current is None:
        console.print(Panel(
            "[dim]No profile yet.[/dim]\n\n"
            "Run [cyan]tradejournal profile set --name NAME --balance AMOUNT[/cyan] to set one up.",
            title="[bold]Profile[/bold]",
            border_style="dim",
        ))
        return

    goals = current.performance_goals
    table = Table(show_header=False, box=None)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Name", current.name)
    table.add_row("Account Balance", money(current.account_balance, current.currency))
    table.add_row("Monthly Profit Goal", money(goals.monthly_profit_goal, current.currency))
    table.add_row("Weekly Profit Target", money(goals.weekly_profit_target, current.currency))
    table.add_row("Max Drawdown Limit", percent(goals.max_drawdown_limit))
    stats = journal.get_stats()
    table.add_row("Trades Logged", str(stats["trades"]))
    table.add_row("Tags", str(stats["tags"]))

    console.print(Panel(table, title="[bold cyan]Profile[/bold cyan]", border_style="cyan"))


@profile.command("set")
@click.option("--name", type=str, default=None, help="Display name.")
@click.option("--balance", type=float, default=None, help="Starting account balance.")
@click.option("--currency", type=str, default=None, help="Currency code, e.g. USD.")
@click.option("--monthly-goal", type=float, default=None, help="Monthly profit goal.")
@click.option("--weekly-target", type=float, default=None, help="Weekly profit target.")
@click.option(
    "--max-drawdown",
    type=float,
    default=None,
    help="Maximum drawdown as a fraction of peak equity (0-1).",
)
def set_profile(
    name: Optional[str],
    balance: Optional[float],
    currency: Optional[str],
    monthly_goal: Optional[float],
    weekly_target: Optional[float],
    max_drawdown: Optional[float],
) -> None:
    """Create or update the profile. Unspecified fields keep their value."""
    from pydantic import ValidationError

    from tradejournal.models import PerformanceGoals, UserProfile

    journal = get_journal()
    current = journal.get_profile()

    if current is None and name is None:
        error_panel("[red]--name is required when creating a profile.[/red]")
        raise SystemExit(1)

    try:
        base = current or UserProfile(name=name)
        goals = base.performance_goals
        updated = UserProfile(
            name=name if name is not None else base.name,
            account_balance=balance if balance is not None else base.account_balance,
            currency=(currency or base.currency).upper(),
            performance_goals=PerformanceGoals(
                monthly_profit_goal=(
                    monthly_goal if monthly_goal is not None else goals.monthly_profit_goal
                ),
                weekly_profit_target=(
                    weekly_target if weekly_target is not None else goals.weekly_profit_target
                ),
                max_drawdown_limit=(
                    max_drawdown if max_drawdown is not None else goals.max_drawdown_limit
                ),
            ),
        )
    except ValidationError as e:
        error_panel(f"[red]Invalid profile:[/red]\n\n{escape(str(e))}")
        raise SystemExit(1)

    journal.save_profile(updated)
    console.print(f"[green]✓[/green] Profile saved for [bold]{updated.name}[/bold]")
