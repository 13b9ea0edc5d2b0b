"""Weekly and monthly performance rollups over the full trade history."""

from collections import defaultdict
from datetime import tzinfo
from typing import Callable

from tradejournal.analytics.bucketing import UTC, month_key, week_key
from tradejournal.analytics.metrics import (
    average_risk_metrics,
    finite,
    total_profit_loss,
    win_rate,
)
from tradejournal.models import PerformanceSummary, PeriodicPerformanceData, TradeEntry, UserProfile


def percentage_return(profit_loss: float, account_balance: float) -> float:
    """P&L as a fraction of the starting balance, 0 without a balance."""
    balance = finite(account_balance)
    if balance <= 0:
        return 0.0
    return profit_loss / balance


def group_by(
    trades: list[TradeEntry], key: Callable[[int], str]
) -> dict[str, list[TradeEntry]]:
    buckets: dict[str, list[TradeEntry]] = defaultdict(list)
    for trade in trades:
        buckets[key(trade.date)].append(trade)
    return buckets


def build_periods(
    trades: list[TradeEntry], key: Callable[[int], str], account_balance: float
) -> list[PeriodicPerformanceData]:
    """Roll trades up into buckets ordered by period key."""
    buckets = group_by(trades, key)
    periods = []
    for period in sorted(buckets):
        bucket = buckets[period]
        profit_loss = total_profit_loss(bucket)
        avg_risk, avg_rr = average_risk_metrics(bucket)
        periods.append(
            PeriodicPerformanceData(
                period=period,
                profit_loss=profit_loss,
                num_trades=len(bucket),
                win_rate=win_rate(bucket),
                percentage_return=percentage_return(profit_loss, account_balance),
                average_risk_percentage=avg_risk,
                average_risk_reward_ratio=avg_rr,
            )
        )
    return periods


def get_performance_summary(
    trades: list[TradeEntry], profile: UserProfile | None, tz: tzinfo = UTC
) -> PerformanceSummary:
    """Weekly and monthly rollups plus global totals.

    ``average_win_rate`` is the win rate across all trades, not the mean
    of per-bucket win rates.
    """
    if not trades:
        return PerformanceSummary()

    balance = profile.account_balance if profile else 0.0
    total = total_profit_loss(trades)
    avg_risk, avg_rr = average_risk_metrics(trades)

    return PerformanceSummary(
        total_profit_loss=total,
        average_win_rate=win_rate(trades),
        total_trades=len(trades),
        cumulative_percentage_return=percentage_return(total, balance),
        weekly_performance=build_periods(trades, lambda ts: week_key(ts, tz), balance),
        monthly_performance=build_periods(trades, lambda ts: month_key(ts, tz), balance),
        average_risk_percentage=avg_risk,
        average_risk_reward_ratio=avg_rr,
    )
