"""Homepage summary: headline numbers, week-over-week change and a mini equity curve."""

import time
from datetime import tzinfo
from typing import Optional

from tradejournal.analytics.bucketing import UTC, previous_week_key, week_key, week_range
from tradejournal.analytics.equity import equity_curve
from tradejournal.analytics.ftmo import get_ftmo_analytics
from tradejournal.analytics.metrics import average_risk_metrics, total_profit_loss, win_rate
from tradejournal.models import HomepageSummaryMetrics, TradeEntry, UserProfile, WeekPerformanceChange

MINI_CURVE_POINTS = 20


def downsample(values: list[float], max_points: int = MINI_CURVE_POINTS) -> list[float]:
    """Evenly sample at most max_points values, keeping the first and last."""
    if len(values) <= max_points:
        return list(values)
    if max_points == 1:
        return [values[-1]]
    step = (len(values) - 1) / (max_points - 1)
    return [values[round(i * step)] for i in range(max_points)]


def get_week_change(
    trades: list[TradeEntry], now_ns: int, tz: tzinfo = UTC
) -> WeekPerformanceChange:
    current = week_key(now_ns, tz)
    previous = previous_week_key(now_ns, tz)
    current_pnl = total_profit_loss(t for t in trades if week_key(t.date, tz) == current)
    previous_pnl = total_profit_loss(t for t in trades if week_key(t.date, tz) == previous)

    difference = current_pnl - previous_pnl
    change = difference / abs(previous_pnl) if previous_pnl != 0 else 0.0

    return WeekPerformanceChange(
        profit_loss=current_pnl,
        percentage_change=change,
        comparison_to_previous_week=difference,
        week_range=week_range(now_ns, tz),
    )


def get_homepage_summary(
    trades: list[TradeEntry],
    profile: UserProfile | None,
    now_ns: Optional[int] = None,
    tz: tzinfo = UTC,
) -> HomepageSummaryMetrics:
    if now_ns is None:
        now_ns = time.time_ns()
    balance = profile.account_balance if profile else 0.0
    avg_risk, avg_rr = average_risk_metrics(trades)

    return HomepageSummaryMetrics(
        total_profit_loss=total_profit_loss(trades),
        win_rate=win_rate(trades),
        last_week_change=get_week_change(trades, now_ns, tz),
        mini_equity_curve=downsample(equity_curve(trades, balance)) if trades else [],
        ftmo_analytics=get_ftmo_analytics(trades, profile, tz),
        average_risk_percentage=avg_risk,
        average_risk_reward_ratio=avg_rr,
    )
