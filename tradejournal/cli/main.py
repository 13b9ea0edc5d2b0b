"""Main CLI entry point for the trade journal.

Commands live in three modules (account, trades, reports) that are
imported on first use, so `tradejournal --help` stays cheap.
"""

import importlib
import logging

import click


# command name -> "module:attribute" of the click command
LAZY_SUBCOMMANDS = {
    "init": "tradejournal.cli.account:init",
    "profile": "tradejournal.cli.account:profile",
    "add": "tradejournal.cli.trades:add",
    "edit": "tradejournal.cli.trades:edit",
    "delete": "tradejournal.cli.trades:delete",
    "trades": "tradejournal.cli.trades:trades",
    "checklist": "tradejournal.cli.trades:checklist",
    "tags": "tradejournal.cli.trades:tags",
    "calendar": "tradejournal.cli.reports:calendar",
    "summary": "tradejournal.cli.reports:summary",
    "ftmo": "tradejournal.cli.reports:ftmo",
    "goals": "tradejournal.cli.reports:goals",
    "home": "tradejournal.cli.reports:home",
    "stats": "tradejournal.cli.reports:stats",
}


def resolve_command(target: str) -> click.Command:
    """Import the click command named by a "module:attribute" target."""
    module_name, _, attr = target.partition(":")
    command = getattr(importlib.import_module(module_name), attr, None)
    if not isinstance(command, click.Command):
        raise click.ClickException(f"{target} is not a click command")
    return command


class JournalGroup(click.Group):
    """Group whose subcommands are resolved from import targets on demand."""

    def __init__(self, *args, targets: dict[str, str] | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.targets = dict(targets or {})

    def list_commands(self, ctx: click.Context) -> list[str]:
        return sorted(self.commands.keys() | self.targets.keys())

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        target = self.targets.get(cmd_name)
        if cmd_name not in self.commands and target is not None:
            self.add_command(resolve_command(target), cmd_name)
        return self.commands.get(cmd_name)


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(cls=JournalGroup, targets=LAZY_SUBCOMMANDS, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="tradejournal")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Trade Journal - log trades and track your performance.

    Record trades with prices, stops, targets and notes, then review
    calendar, weekly/monthly, FTMO-style and goal analytics.

    \b
    Quick Start:
      tradejournal init                 # Create a config file
      tradejournal profile set          # Set balance, currency and goals
      tradejournal add EURUSD buy ...   # Log a trade
      tradejournal home                 # Dashboard overview
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
