"""Tests for the journal service: validation, derived fields and invalidation.

**Feature: trade-journal**
"""

import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tradejournal.db.store import JournalStore
from tradejournal.journal import (
    SUMMARY_DEPENDENCIES,
    Mutation,
    ProfileNotFoundError,
    SummaryCache,
    TradeJournal,
    TradeNotFoundError,
    TradeValidationError,
    validate_trade_request,
)
from tradejournal.models import (
    PerformanceGoals,
    TradeChecklist,
    TradeChecklistItem,
    TradeDirection,
    TradeRequest,
    UserProfile,
)


def ns(year, month, day, hour=12):
    return int(datetime(year, month, day, hour, tzinfo=timezone.utc).timestamp()) * 1_000_000_000


def make_request(**overrides):
    fields = dict(
        date=ns(2024, 3, 11),
        direction=TradeDirection.BUY,
        asset="AAPL",
        entry_price=100,
        exit_price=110,
        position_size=10,
        stop_loss=95,
        take_profit=120,
    )
    fields.update(overrides)
    return TradeRequest(**fields)


@pytest.fixture
def journal():
    """Create a journal over a temporary database."""
    with tempfile.TemporaryDirectory() as tmpdir:
        store = JournalStore(Path(tmpdir) / "test.db")
        journal = TradeJournal(store, "alice")
        journal.save_profile(
            UserProfile(
                name="Alice",
                account_balance=10000,
                performance_goals=PerformanceGoals(weekly_profit_target=100),
            )
        )
        yield journal


class TestValidation:
    def test_valid_request(self):
        assert validate_trade_request(make_request()) == []

    def test_sell_valid(self):
        request = make_request(direction=TradeDirection.SELL, stop_loss=105, take_profit=90)
        assert validate_trade_request(request) == []

    def test_missing_fields(self):
        errors = validate_trade_request(
            make_request(asset="  ", entry_price=0, exit_price=float("nan"), position_size=-1,
                         stop_loss=0, take_profit=float("inf"))
        )
        assert errors == [
            "Asset symbol is required",
            "Entry price must be a valid positive number",
            "Exit price must be a valid positive number",
            "Position size must be a valid number greater than zero",
            "Stop loss is required and must be a valid positive number",
            "Take profit is required and must be a valid positive number",
        ]

    def test_buy_levels(self):
        errors = validate_trade_request(make_request(stop_loss=101, take_profit=99))
        assert errors == [
            "For Buy trades, stop loss must be below entry price",
            "For Buy trades, take profit must be above entry price",
        ]

    def test_sell_levels(self):
        errors = validate_trade_request(
            make_request(direction=TradeDirection.SELL, stop_loss=95, take_profit=120)
        )
        assert errors == [
            "For Sell trades, stop loss must be above entry price",
            "For Sell trades, take profit must be below entry price",
        ]

    def test_rejected_trade_not_stored(self, journal: TradeJournal):
        with pytest.raises(TradeValidationError) as exc_info:
            journal.add_trade(make_request(asset=""))
        assert exc_info.value.errors == ["Asset symbol is required"]
        assert journal.get_all_trades() == []


class TestAddTrade:
    def test_metrics_computed(self, journal: TradeJournal):
        result = journal.add_trade(make_request(tags=["breakout"]))
        trade = result.trade

        assert trade.id
        assert trade.profit_loss == pytest.approx(100)
        assert trade.risk_percentage == pytest.approx(0.5)
        assert trade.risk_reward_ratio == pytest.approx(4)
        assert journal.get_trade(trade.id) == trade
        assert journal.get_tags() == ["breakout"]
        assert [t.id for t in journal.filter_trades_by_tag("breakout")] == [trade.id]

    def test_returns_updated_goals(self, journal: TradeJournal):
        result = journal.add_trade(make_request())
        assert result.updated_goals.weekly_profit_target == 100

    def test_without_profile(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            journal = TradeJournal(JournalStore(Path(tmpdir) / "test.db"), "bob")
            trade = journal.add_trade(make_request()).trade
            assert trade.risk_percentage == 0
            assert trade.profit_loss == pytest.approx(100)
            with pytest.raises(ProfileNotFoundError):
                journal.require_profile()

    def test_default_checklist(self, journal: TradeJournal):
        trade = journal.add_trade(make_request()).trade
        assert [item.id for item in trade.checklist.items] == ["bias", "obs", "lqs", "fvg"]
        assert trade.checklist.completion_percentage == 0

    @given(
        entry=st.floats(min_value=1, max_value=1000),
        exit_=st.floats(min_value=1, max_value=1000),
        size=st.floats(min_value=0.01, max_value=100),
    )
    @settings(max_examples=20, deadline=None)
    def test_profit_loss_matches_prices(self, entry, exit_, size):
        with tempfile.TemporaryDirectory() as tmpdir:
            journal = TradeJournal(JournalStore(Path(tmpdir) / "test.db"), "alice")
            request = make_request(
                entry_price=entry, exit_price=exit_, position_size=size,
                stop_loss=entry / 2, take_profit=entry * 2,
            )
            trade = journal.add_trade(request).trade
            assert trade.profit_loss == pytest.approx((exit_ - entry) * size)


class TestEditAndDelete:
    def test_edit_recomputes_and_keeps_checklist(self, journal: TradeJournal):
        trade = journal.add_trade(make_request()).trade
        confirmed = TradeChecklist(
            items=[TradeChecklistItem(id="bias", description="Bias", confirmed=True)]
        )
        journal.update_trade_checklist(trade.id, confirmed)

        edited = journal.edit_trade(trade.id, make_request(exit_price=90))
        assert edited.id == trade.id
        assert edited.profit_loss == pytest.approx(-100)
        assert edited.checklist == confirmed
        assert journal.get_trade(trade.id) == edited

    def test_edit_missing(self, journal: TradeJournal):
        with pytest.raises(TradeNotFoundError):
            journal.edit_trade("missing", make_request())

    def test_edit_invalid(self, journal: TradeJournal):
        trade = journal.add_trade(make_request()).trade
        with pytest.raises(TradeValidationError):
            journal.edit_trade(trade.id, make_request(stop_loss=150))
        assert journal.get_trade(trade.id) == trade

    def test_delete(self, journal: TradeJournal):
        trade = journal.add_trade(make_request()).trade
        goals = journal.delete_trade(trade.id)
        assert goals.weekly_profit_target == 100
        assert goals.achievement_badge is None
        assert journal.get_all_trades() == []
        with pytest.raises(TradeNotFoundError):
            journal.delete_trade(trade.id)

    def test_pagination(self, journal: TradeJournal):
        for day in (4, 5, 6):
            journal.add_trade(make_request(date=ns(2024, 3, day)))
        page = journal.get_trades_page(0, 2)
        assert [t.date for t in page] == [ns(2024, 3, 6), ns(2024, 3, 5)]


class TestEntryOrder:
    def test_same_timestamp_keeps_entry_order(self, journal: TradeJournal):
        win = journal.add_trade(make_request()).trade
        loss = journal.add_trade(make_request(exit_price=80)).trade
        assert win.date == loss.date
        assert 0 < win.sequence < loss.sequence

        assert [t.id for t in journal.get_all_trades()] == [win.id, loss.id]
        assert [t.id for t in journal.get_trades_for_day(11, 3, 2024)] == [win.id, loss.id]
        # equity 10000 -> 10100 -> 9900
        goals = journal.get_performance_goals_summary(ns(2024, 3, 13))
        assert goals.current_drawdown == pytest.approx(200 / 10100)

    def test_edit_keeps_sequence(self, journal: TradeJournal):
        first = journal.add_trade(make_request()).trade
        second = journal.add_trade(make_request()).trade
        edited = journal.edit_trade(first.id, make_request(exit_price=105))
        assert edited.sequence == first.sequence
        assert [t.id for t in journal.get_all_trades()] == [first.id, second.id]


class TestBalanceChange:
    def test_risk_recomputed(self, journal: TradeJournal):
        trade = journal.add_trade(make_request()).trade
        assert trade.risk_percentage == pytest.approx(0.5)

        profile = journal.require_profile()
        journal.save_profile(profile.model_copy(update={"account_balance": 5000}))

        assert journal.get_trade(trade.id).risk_percentage == pytest.approx(1.0)
        assert journal.get_all_trades()[0].risk_percentage == pytest.approx(1.0)

    def test_goal_change_keeps_metrics(self, journal: TradeJournal):
        trade = journal.add_trade(make_request()).trade
        profile = journal.require_profile()
        journal.save_profile(
            profile.model_copy(
                update={"performance_goals": PerformanceGoals(weekly_profit_target=500)}
            )
        )
        assert journal.get_trade(trade.id) == trade
        assert journal.get_profile().performance_goals.weekly_profit_target == 500


class TestDerivedSummariesStayFresh:
    def test_calendar_after_add(self, journal: TradeJournal):
        assert journal.get_calendar_performance(3, 2024) == []
        journal.add_trade(make_request())
        days = journal.get_calendar_performance(3, 2024)
        assert [d.day for d in days] == [11]
        assert days[0].total_profit_loss == pytest.approx(100)

    def test_trades_for_day_after_checklist(self, journal: TradeJournal):
        trade = journal.add_trade(make_request()).trade
        assert journal.get_trades_for_day(11, 3, 2024)[0].checklist.confirmed_count == 0

        checklist = TradeChecklist(
            items=[TradeChecklistItem(id="bias", description="Bias", confirmed=True)]
        )
        journal.update_trade_checklist(trade.id, checklist)
        assert journal.get_trades_for_day(11, 3, 2024)[0].checklist.confirmed_count == 1

    def test_calendar_after_checklist(self, journal: TradeJournal):
        journal.add_trade(make_request())
        before = journal.get_calendar_performance(3, 2024)
        trade_id = before[0].trades[0].id
        assert before[0].trades[0].checklist.confirmed_count == 0

        new = TradeChecklist(
            items=[TradeChecklistItem(id="bias", description="Bias", confirmed=True)]
        )
        journal.update_trade_checklist(trade_id, new)
        after = journal.get_calendar_performance(3, 2024)
        assert after[0].trades[0].checklist == new

    def test_summaries_after_delete(self, journal: TradeJournal):
        trade = journal.add_trade(make_request()).trade
        now = ns(2024, 3, 13)
        assert journal.get_performance_summary().total_profit_loss == pytest.approx(100)
        assert journal.get_homepage_summary(now).total_profit_loss == pytest.approx(100)
        assert journal.get_performance_goals_summary(now).current_week_profit == pytest.approx(100)
        assert journal.get_trade_statistics().total_trades == 1

        journal.delete_trade(trade.id)
        assert journal.get_performance_summary().total_profit_loss == 0
        assert journal.get_homepage_summary(now).total_profit_loss == 0
        assert journal.get_performance_goals_summary(now).current_week_profit == 0
        assert journal.get_trade_statistics().total_trades == 0
        assert journal.get_ftmo_analytics().max_daily_profit == 0

    def test_wall_clock_summaries_stay_bounded(self, journal: TradeJournal):
        journal.add_trade(make_request())
        start = ns(2024, 3, 13)
        for i in range(500):
            now = start + i * 1_000_000
            assert journal.get_performance_goals_summary(now).current_week_profit == pytest.approx(100)
            journal.get_homepage_summary(now)
        assert journal.cache.entries("goals") == 1
        assert journal.cache.entries("homepage") == 1

    def test_wall_clock_summaries_follow_the_week(self, journal: TradeJournal):
        journal.add_trade(make_request())
        assert journal.get_performance_goals_summary(ns(2024, 3, 13)).current_week_profit == pytest.approx(100)
        assert journal.get_performance_goals_summary(ns(2024, 3, 20)).current_week_profit == 0

    def test_summary_after_profile_change(self, journal: TradeJournal):
        journal.add_trade(make_request())
        assert journal.get_performance_summary().cumulative_percentage_return == pytest.approx(0.01)

        profile = journal.require_profile()
        journal.save_profile(profile.model_copy(update={"account_balance": 20000}))
        assert journal.get_performance_summary().cumulative_percentage_return == pytest.approx(0.005)


class TestSummaryCache:
    def test_memoizes_until_invalidated(self):
        cache = SummaryCache()
        calls = []

        def compute():
            calls.append(1)
            return len(calls)

        assert cache.get_or_compute("calendar", (3, 2024), compute) == 1
        assert cache.get_or_compute("calendar", (3, 2024), compute) == 1
        assert cache.get_or_compute("calendar", (4, 2024), compute) == 2

        stale = cache.invalidate(Mutation.TRADE_ADDED)
        assert "calendar" in stale
        assert cache.revision("calendar") == 1
        assert cache.get_or_compute("calendar", (3, 2024), compute) == 3

    def test_checklist_update_scope(self):
        cache = SummaryCache()
        stale = cache.invalidate(Mutation.CHECKLIST_UPDATED)
        assert set(stale) == {"trades", "trades_for_day", "calendar"}
        assert cache.revision("ftmo") == 0

    def test_profile_save_scope(self):
        stale = SummaryCache().invalidate(Mutation.PROFILE_SAVED)
        assert "profile" in stale
        assert "goals" in stale

    def test_evicts_oldest_params(self):
        cache = SummaryCache(max_entries=2)
        calls = []

        def compute():
            calls.append(1)
            return len(calls)

        cache.get_or_compute("goals", "2024-W10", compute)
        cache.get_or_compute("goals", "2024-W11", compute)
        cache.get_or_compute("goals", "2024-W12", compute)
        cache.get_or_compute("calendar", (3, 2024), compute)
        assert cache.entries("goals") == 2
        assert len(cache) == 3

        assert cache.get_or_compute("goals", "2024-W12", compute) == 3
        assert cache.get_or_compute("goals", "2024-W10", compute) == 5

    @pytest.mark.parametrize(
        "mutation", [Mutation.TRADE_ADDED, Mutation.TRADE_EDITED, Mutation.TRADE_DELETED]
    )
    def test_trade_mutations_stale_every_trade_summary(self, mutation):
        stale = SummaryCache().invalidate(mutation)
        assert set(stale) == set(SUMMARY_DEPENDENCIES) - {"profile"}
