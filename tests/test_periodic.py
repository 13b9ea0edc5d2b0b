"""Property-based tests for weekly/monthly rollups.

**Feature: trade-journal**
"""

import math
from datetime import datetime, timezone

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tradejournal.analytics.periodic import get_performance_summary
from tradejournal.models import PerformanceGoals, TradeDirection, TradeEntry, UserProfile


def ns(year, month, day, hour=12):
    return int(datetime(year, month, day, hour, tzinfo=timezone.utc).timestamp()) * 1_000_000_000


def make_trade(trade_id, date_ns, pnl, risk=1.0, ratio=2.0):
    return TradeEntry(
        id=trade_id,
        date=date_ns,
        direction=TradeDirection.BUY,
        asset="EURUSD",
        entry_price=100,
        exit_price=100,
        position_size=1,
        stop_loss=95,
        take_profit=110,
        profit_loss=pnl,
        risk_percentage=risk,
        risk_reward_ratio=ratio,
    )


PROFILE = UserProfile(name="Alex", account_balance=10000, currency="USD")


def trade_strategy():
    return st.builds(
        make_trade,
        trade_id=st.uuids().map(lambda u: u.hex),
        date_ns=st.datetimes(
            min_value=datetime(2022, 1, 1),
            max_value=datetime(2025, 12, 31),
            timezones=st.just(timezone.utc),
        ).map(lambda d: int(d.timestamp()) * 1_000_000_000),
        pnl=st.floats(min_value=-10000, max_value=10000, allow_nan=False, allow_infinity=False),
    )


class TestPerformanceSummaryScenarios:
    def test_empty_trade_list(self):
        summary = get_performance_summary([], PROFILE)
        assert summary.total_profit_loss == 0
        assert summary.total_trades == 0
        assert summary.average_win_rate == 0
        assert summary.weekly_performance == []
        assert summary.monthly_performance == []

    def test_buckets_and_totals(self):
        trades = [
            make_trade("a", ns(2024, 3, 4), 100),
            make_trade("b", ns(2024, 3, 11), -50),
            make_trade("c", ns(2024, 3, 12), 20),
            make_trade("d", ns(2024, 4, 2), 30),
        ]
        summary = get_performance_summary(trades, PROFILE)

        assert summary.total_trades == 4
        assert summary.total_profit_loss == pytest.approx(100)
        assert summary.cumulative_percentage_return == pytest.approx(0.01)
        assert [p.period for p in summary.monthly_performance] == ["2024-03", "2024-04"]
        assert [p.period for p in summary.weekly_performance] == ["2024-W09", "2024-W10", "2024-W13"]

        march = summary.monthly_performance[0]
        assert march.profit_loss == pytest.approx(70)
        assert march.num_trades == 3
        assert march.win_rate == pytest.approx(2 / 3)
        assert march.percentage_return == pytest.approx(0.007)

    def test_overall_win_rate_is_not_mean_of_bucket_rates(self):
        trades = [
            make_trade("a", ns(2024, 3, 4), 10),
            make_trade("b", ns(2024, 3, 11), 10),
            make_trade("c", ns(2024, 3, 12), -5),
            make_trade("d", ns(2024, 3, 13), -5),
        ]
        summary = get_performance_summary(trades, PROFILE)
        bucket_rates = [p.win_rate for p in summary.weekly_performance]

        assert summary.average_win_rate == pytest.approx(0.5)
        assert sum(bucket_rates) / len(bucket_rates) == pytest.approx(2 / 3)

    def test_zero_balance_has_no_returns(self):
        profile = UserProfile(name="Alex", account_balance=0, performance_goals=PerformanceGoals())
        summary = get_performance_summary([make_trade("a", ns(2024, 3, 4), 100)], profile)
        assert summary.cumulative_percentage_return == 0.0
        assert summary.weekly_performance[0].percentage_return == 0.0

    def test_missing_profile(self):
        summary = get_performance_summary([make_trade("a", ns(2024, 3, 4), 100)], None)
        assert summary.total_profit_loss == pytest.approx(100)
        assert summary.cumulative_percentage_return == 0.0


class TestWeeklyMonthlyCrossCheck:
    """
    **Feature: trade-journal, Property 4: Weekly and monthly totals agree**

    *For any* trade set, weekly P&L, monthly P&L and total P&L are equal.
    """

    @given(trades=st.lists(trade_strategy(), min_size=0, max_size=60))
    @settings(max_examples=100)
    def test_sums_agree(self, trades):
        summary = get_performance_summary(trades, PROFILE)
        weekly = math.fsum(p.profit_loss for p in summary.weekly_performance)
        monthly = math.fsum(p.profit_loss for p in summary.monthly_performance)

        assert weekly == pytest.approx(monthly, abs=1e-6)
        assert weekly == pytest.approx(summary.total_profit_loss, abs=1e-6)
        assert sum(p.num_trades for p in summary.weekly_performance) == len(trades)
        assert sum(p.num_trades for p in summary.monthly_performance) == len(trades)

    @given(trades=st.lists(trade_strategy(), min_size=0, max_size=60))
    @settings(max_examples=50)
    def test_periods_ascending(self, trades):
        summary = get_performance_summary(trades, PROFILE)
        for periods in (summary.weekly_performance, summary.monthly_performance):
            keys = [p.period for p in periods]
            assert keys == sorted(keys)
            assert len(keys) == len(set(keys))
