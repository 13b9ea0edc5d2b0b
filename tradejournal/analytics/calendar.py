"""Calendar aggregation: one performance record per traded day of a month."""

import math
from collections import defaultdict
from datetime import tzinfo

from tradejournal.analytics.bucketing import UTC, day_of_month
from tradejournal.analytics.equity import chronological
from tradejournal.analytics.metrics import average_risk_metrics, total_profit_loss
from tradejournal.models import CalendarDayPerformance, CalendarDayStatus, TradeEntry


def day_status(total: float) -> CalendarDayStatus:
    if total > 0:
        return CalendarDayStatus.PROFIT
    if total < 0:
        return CalendarDayStatus.LOSS
    return CalendarDayStatus.NEUTRAL


def get_trades_for_day(
    trades: list[TradeEntry], day: int, month: int, year: int, tz: tzinfo = UTC
) -> list[TradeEntry]:
    """Trades whose bucketed day is day/month/year, in chronological order."""
    matching = [
        trade for trade in trades if day_of_month(trade.date, month, year, tz) == day
    ]
    return chronological(matching)


def get_calendar_performance(
    trades: list[TradeEntry], month: int, year: int, tz: tzinfo = UTC
) -> list[CalendarDayPerformance]:
    """Build per-day performance for the given month.

    Days without trades are omitted; the result is ordered by day.

    Args:
        trades: Full trade list.
        month: Target month, 1-12.
        year: Target year.
        tz: Calendar anchor, UTC by default.

    Returns:
        List of CalendarDayPerformance, one per traded day.
    """
    by_day: dict[int, list[TradeEntry]] = defaultdict(list)
    for trade in trades:
        day = day_of_month(trade.date, month, year, tz)
        if day is not None:
            by_day[day].append(trade)

    result = []
    for day in sorted(by_day):
        day_trades = chronological(by_day[day])
        total = total_profit_loss(day_trades)
        avg_risk, avg_rr = average_risk_metrics(day_trades)
        result.append(
            CalendarDayPerformance(
                day=day,
                total_profit_loss=total,
                trades=day_trades,
                average_risk_percentage=avg_risk,
                average_risk_reward_ratio=avg_rr,
                status=day_status(total),
            )
        )
    return result


def month_total(days: list[CalendarDayPerformance]) -> float:
    return math.fsum(day.total_profit_loss for day in days)
