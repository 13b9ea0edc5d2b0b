"""FTMO-style compliance evaluation.

The thresholds below are fixed policy modeled on prop-firm evaluation
rules and are not user-configurable.
"""

import math
import statistics
from datetime import tzinfo

from tradejournal.analytics.bucketing import UTC, day_key
from tradejournal.analytics.metrics import average_risk_metrics, finite, total_profit_loss
from tradejournal.analytics.periodic import group_by
from tradejournal.models import FTMOAnalytics, TradeEntry, UserProfile

MAX_DAILY_LOSS_FRACTION = 0.05
PROFIT_TARGET_FRACTION = 0.10
MAX_CONSISTENCY_RATE = 0.5


def daily_totals(trades: list[TradeEntry], tz: tzinfo = UTC) -> list[float]:
    """P&L per traded calendar day, in chronological order."""
    buckets = group_by(trades, lambda ts: day_key(ts, tz))
    return [total_profit_loss(buckets[day]) for day in sorted(buckets)]


def consistency_rate(totals: list[float]) -> float:
    """Sample variance of daily P&L over the absolute mean daily P&L.

    Zero with fewer than two days of data or a zero mean.
    """
    if len(totals) < 2:
        return 0.0
    mean = math.fsum(totals) / len(totals)
    if mean == 0:
        return 0.0
    return statistics.variance(totals) / abs(mean)


def profit_target_progress(total: float, account_balance: float) -> float:
    target = finite(account_balance) * PROFIT_TARGET_FRACTION
    if target <= 0:
        return 0.0
    return total / target


def is_compliant(
    max_daily_loss: float, progress: float, consistency: float, account_balance: float
) -> bool:
    if max_daily_loss < -MAX_DAILY_LOSS_FRACTION * finite(account_balance):
        return False
    return progress >= 1.0 and consistency <= MAX_CONSISTENCY_RATE


def get_ftmo_analytics(
    trades: list[TradeEntry], profile: UserProfile | None, tz: tzinfo = UTC
) -> FTMOAnalytics:
    if not trades:
        return FTMOAnalytics()

    balance = profile.account_balance if profile else 0.0
    totals = daily_totals(trades, tz)
    max_daily_loss = min(totals)
    max_daily_profit = max(totals)
    progress = profit_target_progress(total_profit_loss(trades), balance)
    consistency = consistency_rate(totals)
    avg_risk, avg_rr = average_risk_metrics(trades)

    return FTMOAnalytics(
        max_daily_loss=max_daily_loss,
        max_daily_profit=max_daily_profit,
        profit_target_progress=progress,
        consistency_rate=consistency,
        average_risk_percentage=avg_risk,
        average_risk_reward_ratio=avg_rr,
        overall_compliance=is_compliant(max_daily_loss, progress, consistency, balance),
    )
