"""Tests for the command line interface.

**Feature: trade-journal**
"""

import time
from datetime import datetime, timezone
from pathlib import Path

import click
import pytest
from click.testing import CliRunner

from tradejournal.cli.helpers import to_nanos
from tradejournal.cli.main import LAZY_SUBCOMMANDS, cli, resolve_command
from tradejournal.config import get_db_path, get_identity, load_config
from tradejournal.db.store import JournalStore
from tradejournal.journal import TradeJournal


@pytest.fixture
def runner(tmp_path: Path, monkeypatch):
    """A CLI runner with an isolated config file and database."""
    monkeypatch.setenv("TRADEJOURNAL_CONFIG", str(tmp_path / "config.toml"))
    return CliRunner()


@pytest.fixture
def ready(runner: CliRunner):
    """A runner with config and profile in place."""
    assert runner.invoke(cli, ["init"]).exit_code == 0
    result = runner.invoke(
        cli, ["profile", "set", "--name", "Alex", "--balance", "10000", "--weekly-target", "100"]
    )
    assert result.exit_code == 0, result.output
    return runner


def open_journal() -> TradeJournal:
    config = load_config()
    return TradeJournal(JournalStore(get_db_path(config)), get_identity(config))


ADD_ARGS = [
    "add", "aapl", "buy", "--date", "2024-03-11", "--size", "10", "--entry", "100",
    "--exit", "110", "--sl", "95", "--tp", "120", "--tag", "breakout",
]


class TestCommandGroup:
    def test_lists_every_command(self, runner: CliRunner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for name in LAZY_SUBCOMMANDS:
            assert name in result.output

    def test_every_command_loads(self, runner: CliRunner):
        for name in LAZY_SUBCOMMANDS:
            result = runner.invoke(cli, [name, "--help"])
            assert result.exit_code == 0, name

    def test_unknown_command(self, runner: CliRunner):
        result = runner.invoke(cli, ["nope"])
        assert result.exit_code == 2
        assert "No such command" in result.output

    def test_target_must_be_a_command(self):
        assert resolve_command("tradejournal.cli.trades:add").name == "add"
        with pytest.raises(click.ClickException):
            resolve_command("tradejournal.cli.trades:TRADE_DATE_FORMATS")
        with pytest.raises(click.ClickException):
            resolve_command("tradejournal.cli.trades:missing")


class TestToNanos:
    def test_naive_datetime_is_utc(self):
        expected = int(datetime(2024, 3, 11, 9, 30, tzinfo=timezone.utc).timestamp()) * 1_000_000_000
        assert to_nanos(datetime(2024, 3, 11, 9, 30)) == expected

    def test_keeps_microseconds(self):
        assert to_nanos(datetime(1970, 1, 1, 0, 0, 1, 250)) == 1_000_250_000


class TestSetup:
    def test_missing_config(self, runner: CliRunner):
        result = runner.invoke(cli, ["home"])
        assert result.exit_code == 1
        assert "Configuration not found" in result.output

    def test_init_writes_config(self, runner: CliRunner, tmp_path: Path):
        result = runner.invoke(cli, ["init"])
        assert result.exit_code == 0
        config = load_config()
        assert get_db_path(config) == tmp_path / "journal.db"
        assert get_identity(config) == "local"

        again = runner.invoke(cli, ["init"])
        assert "already exists" in again.output

    def test_profile_requires_name(self, runner: CliRunner):
        runner.invoke(cli, ["init"])
        result = runner.invoke(cli, ["profile", "set", "--balance", "5000"])
        assert result.exit_code == 1

    def test_profile_round_trip(self, ready: CliRunner):
        result = ready.invoke(cli, ["profile", "set", "--currency", "eur", "--max-drawdown", "0.1"])
        assert result.exit_code == 0
        assert "Profile saved for" in result.output

        profile = open_journal().get_profile()
        assert profile.name == "Alex"
        assert profile.account_balance == 10000
        assert profile.currency == "EUR"
        assert profile.performance_goals.max_drawdown_limit == 0.1

        shown = ready.invoke(cli, ["profile", "show"])
        assert shown.exit_code == 0
        assert "Alex" in shown.output
        assert "Trades Logged" in shown.output

    def test_invalid_drawdown(self, ready: CliRunner):
        result = ready.invoke(cli, ["profile", "set", "--max-drawdown", "2"])
        assert result.exit_code == 1
        assert "Invalid profile" in result.output


class TestTradeCommands:
    def test_add(self, ready: CliRunner):
        result = ready.invoke(cli, ADD_ARGS)
        assert result.exit_code == 0, result.output
        assert "Trade Logged" in result.output

        trades = open_journal().get_all_trades()
        assert len(trades) == 1
        assert trades[0].asset == "AAPL"
        assert trades[0].profit_loss == pytest.approx(100)
        assert trades[0].risk_percentage == pytest.approx(0.5)
        assert trades[0].tags == ["breakout"]

    def test_add_with_time_of_day(self, ready: CliRunner):
        args = list(ADD_ARGS)
        args[args.index("--date") + 1] = "2024-03-11 09:30"
        result = ready.invoke(cli, args)
        assert result.exit_code == 0, result.output

        expected = int(datetime(2024, 3, 11, 9, 30, tzinfo=timezone.utc).timestamp()) * 1_000_000_000
        assert open_journal().get_all_trades()[0].date == expected

    def test_add_defaults_to_now(self, ready: CliRunner):
        args = list(ADD_ARGS)
        del args[args.index("--date"):args.index("--date") + 2]
        before = time.time_ns()
        result = ready.invoke(cli, args)
        after = time.time_ns()
        assert result.exit_code == 0, result.output
        assert before <= open_journal().get_all_trades()[0].date <= after

    def test_trades_added_together_keep_entry_order(self, ready: CliRunner):
        ready.invoke(cli, ADD_ARGS)
        loss = list(ADD_ARGS)
        loss[loss.index("--exit") + 1] = "90"
        ready.invoke(cli, loss)

        trades = open_journal().get_all_trades()
        assert [t.profit_loss for t in trades] == pytest.approx([100, -100])
        assert trades[0].sequence < trades[1].sequence

    def test_add_rejected(self, ready: CliRunner):
        args = list(ADD_ARGS)
        args[args.index("--sl") + 1] = "105"
        result = ready.invoke(cli, args)
        assert result.exit_code == 1
        assert "Trade rejected" in result.output
        assert open_journal().get_all_trades() == []

    def test_edit_and_delete(self, ready: CliRunner):
        ready.invoke(cli, ADD_ARGS)
        original = open_journal().get_all_trades()[0]
        trade_id = original.id

        edited = ready.invoke(cli, ["edit", trade_id] + ADD_ARGS[1:3] + [
            "--size", "10", "--entry", "100", "--exit", "90", "--sl", "95", "--tp", "120",
        ])
        assert edited.exit_code == 0, edited.output
        assert "Trade Updated" in edited.output
        assert open_journal().get_trade(trade_id).profit_loss == pytest.approx(-100)
        assert open_journal().get_trade(trade_id).date == original.date

        deleted = ready.invoke(cli, ["delete", trade_id, "-y"])
        assert deleted.exit_code == 0
        assert open_journal().get_all_trades() == []

        missing = ready.invoke(cli, ["delete", trade_id, "-y"])
        assert missing.exit_code == 1

    def test_checklist(self, ready: CliRunner):
        ready.invoke(cli, ADD_ARGS)
        trade_id = open_journal().get_all_trades()[0].id

        result = ready.invoke(cli, ["checklist", trade_id, "--confirm", "bias", "--confirm", "fvg"])
        assert result.exit_code == 0, result.output
        assert "50% complete" in result.output
        assert open_journal().get_trade(trade_id).checklist.confirmed_count == 2

    def test_list_and_tags(self, ready: CliRunner):
        empty = ready.invoke(cli, ["trades"])
        assert "No trades found" in empty.output

        ready.invoke(cli, ADD_ARGS)
        assert ready.invoke(cli, ["trades"]).exit_code == 0
        assert ready.invoke(cli, ["trades", "--page", "0", "--page-size", "5"]).exit_code == 0
        assert "No trades found" in ready.invoke(cli, ["trades", "--tag", "asia"]).output

        ready.invoke(cli, ["tags", "asia"])
        result = ready.invoke(cli, ["tags"])
        assert "asia, breakout" in result.output


class TestReportCommands:
    @pytest.mark.parametrize(
        "args",
        [
            ["calendar", "--month", "3", "--year", "2024"],
            ["calendar", "--month", "3", "--year", "2024", "--day", "11"],
            ["summary"],
            ["summary", "--period", "monthly"],
            ["ftmo"],
            ["goals"],
            ["home"],
            ["stats"],
        ],
    )
    def test_reports_run(self, ready: CliRunner, args):
        ready.invoke(cli, ADD_ARGS)
        result = ready.invoke(cli, args)
        assert result.exit_code == 0, result.output

    @pytest.mark.parametrize("command", ["summary", "ftmo", "goals", "home", "stats"])
    def test_reports_without_trades(self, ready: CliRunner, command):
        result = ready.invoke(cli, [command])
        assert result.exit_code == 0, result.output

    def test_calendar_day_listing(self, ready: CliRunner):
        ready.invoke(cli, ADD_ARGS)
        result = ready.invoke(cli, ["calendar", "--month", "3", "--year", "2024", "--day", "11"])
        assert "Trades on 2024-03-11" in result.output

        empty = ready.invoke(cli, ["calendar", "--month", "3", "--year", "2024", "--day", "12"])
        assert "No trades on 2024-03-12" in empty.output
