"""Goal tracking and achievement badges.

Goal status is recomputed on every query from the trade list, the profile
and the current time; nothing here is persisted.

Status rules, in order:

* drawdown limit set and current drawdown at or beyond it -> ``atLimit``
* no target set -> ``onTrack``
* progress below ``ON_TRACK_FLOOR`` -> ``underTarget``
* progress above ``OVER_TARGET_CEILING`` -> ``overTarget``
* otherwise -> ``onTrack``
"""

import time
from collections import defaultdict
from datetime import tzinfo
from typing import Optional

from tradejournal.analytics.bucketing import UTC, month_key, week_key
from tradejournal.analytics.equity import chronological, equity_curve, max_drawdown
from tradejournal.analytics.metrics import finite, total_profit_loss
from tradejournal.models import (
    AchievementBadge,
    AchievementBadgeStatus,
    GoalStatus,
    PerformanceGoalsSummary,
    TradeEntry,
    UserProfile,
)

ON_TRACK_FLOOR = 0.0
OVER_TARGET_CEILING = 1.5

# Tie-break when several events share a timestamp
BADGE_PRIORITY = {
    AchievementBadgeStatus.GOAL_ACHIEVED: 2,
    AchievementBadgeStatus.TARGET_REACHED: 1,
    AchievementBadgeStatus.MILESTONE: 0,
}


def goal_progress(profit: float, target: float) -> float:
    """Profit as a fraction of target; 0 when no target is set."""
    target = finite(target)
    if target <= 0:
        return 0.0
    return profit / target


def drawdown_breached(current_drawdown: float, limit: float) -> bool:
    return limit > 0 and current_drawdown >= limit


def classify_goal(progress: float, target: float, breached: bool) -> GoalStatus:
    if breached:
        return GoalStatus.AT_LIMIT
    if finite(target) <= 0:
        return GoalStatus.ON_TRACK
    if progress < ON_TRACK_FLOOR:
        return GoalStatus.UNDER_TARGET
    if progress > OVER_TARGET_CEILING:
        return GoalStatus.OVER_TARGET
    return GoalStatus.ON_TRACK


def overall_status(
    weekly_status: GoalStatus, monthly_status: GoalStatus, breached: bool
) -> GoalStatus:
    """Drawdown breach wins, then a monthly shortfall, then the weekly status."""
    if breached:
        return GoalStatus.AT_LIMIT
    if monthly_status == GoalStatus.UNDER_TARGET:
        return GoalStatus.UNDER_TARGET
    return weekly_status


def badge_events(
    trades: list[TradeEntry], profile: UserProfile, tz: tzinfo = UTC
) -> list[tuple[AchievementBadge, str, float]]:
    """Replay the trade history and collect every badge-worthy event.

    Returns:
        List of (badge, period key, equity at the event). The period key
        is the month key for monthly goals and the week key otherwise.
    """
    goals = profile.performance_goals
    weekly_target = finite(goals.weekly_profit_target)
    monthly_goal = finite(goals.monthly_profit_goal)
    currency = profile.currency

    week_totals: dict[str, float] = defaultdict(float)
    month_totals: dict[str, float] = defaultdict(float)
    equity = finite(profile.account_balance)
    peak = equity
    events = []

    for trade in chronological(trades):
        pnl = finite(trade.profit_loss)
        wk = week_key(trade.date, tz)
        mk = month_key(trade.date, tz)

        before = month_totals[mk]
        month_totals[mk] += pnl
        if monthly_goal > 0 and before < monthly_goal <= month_totals[mk]:
            events.append((
                AchievementBadge(
                    title="Monthly Goal Achieved!",
                    status=AchievementBadgeStatus.GOAL_ACHIEVED,
                    description=f"You reached your monthly profit goal of {monthly_goal:,.2f} {currency}.",
                    timestamp=trade.date,
                ),
                mk,
                equity + pnl,
            ))

        before = week_totals[wk]
        week_totals[wk] += pnl
        if weekly_target > 0 and before < weekly_target <= week_totals[wk]:
            events.append((
                AchievementBadge(
                    title="Weekly Target Reached!",
                    status=AchievementBadgeStatus.TARGET_REACHED,
                    description=f"You hit your weekly profit target of {weekly_target:,.2f} {currency}.",
                    timestamp=trade.date,
                ),
                wk,
                equity + pnl,
            ))

        equity += pnl
        if equity > peak:
            peak = equity
            events.append((
                AchievementBadge(
                    title="New Equity High",
                    status=AchievementBadgeStatus.MILESTONE,
                    description=f"Account equity reached a new high of {equity:,.2f} {currency}.",
                    timestamp=trade.date,
                ),
                wk,
                equity,
            ))

    return events


def select_badge(
    events: list[tuple[AchievementBadge, str, float]],
    current_week: str,
    current_month: str,
    weekly_progress: float,
    monthly_progress: float,
    current_equity: float,
) -> Optional[AchievementBadge]:
    """Pick the most recent event whose condition still holds."""
    candidates = []
    for badge, period, equity in events:
        if badge.status == AchievementBadgeStatus.GOAL_ACHIEVED:
            holds = period == current_month and monthly_progress >= 1.0
        elif badge.status == AchievementBadgeStatus.TARGET_REACHED:
            holds = period == current_week and weekly_progress >= 1.0
        else:
            holds = period == current_week and current_equity >= equity
        if holds:
            candidates.append(badge)
    if not candidates:
        return None
    return max(candidates, key=lambda badge: (badge.timestamp, BADGE_PRIORITY[badge.status]))


def get_performance_goals_summary(
    trades: list[TradeEntry],
    profile: UserProfile | None,
    now_ns: Optional[int] = None,
    tz: tzinfo = UTC,
) -> PerformanceGoalsSummary:
    """Evaluate weekly/monthly goals and drawdown as of now_ns.

    Args:
        trades: Full trade list.
        profile: Owner profile; without one every goal is disabled.
        now_ns: Evaluation time in epoch nanoseconds, wall clock by default.
        tz: Calendar anchor, UTC by default.

    Returns:
        PerformanceGoalsSummary, with at most one achievement badge.
    """
    if profile is None:
        return PerformanceGoalsSummary()
    if now_ns is None:
        now_ns = time.time_ns()

    goals = profile.performance_goals
    current_week = week_key(now_ns, tz)
    current_month = month_key(now_ns, tz)

    week_profit = total_profit_loss(t for t in trades if week_key(t.date, tz) == current_week)
    month_profit = total_profit_loss(t for t in trades if month_key(t.date, tz) == current_month)
    weekly_progress = goal_progress(week_profit, goals.weekly_profit_target)
    monthly_progress = goal_progress(month_profit, goals.monthly_profit_goal)

    curve = equity_curve(trades, profile.account_balance)
    drawdown = max_drawdown(curve) if profile.account_balance > 0 else 0.0
    breached = drawdown_breached(drawdown, goals.max_drawdown_limit)

    weekly_status = classify_goal(weekly_progress, goals.weekly_profit_target, breached)
    monthly_status = classify_goal(monthly_progress, goals.monthly_profit_goal, breached)

    badge = select_badge(
        badge_events(trades, profile, tz),
        current_week,
        current_month,
        weekly_progress,
        monthly_progress,
        curve[-1],
    )

    return PerformanceGoalsSummary(
        monthly_profit_goal=goals.monthly_profit_goal,
        monthly_profit_progress=monthly_progress,
        weekly_profit_target=goals.weekly_profit_target,
        current_week_profit=week_profit,
        weekly_progress=weekly_progress,
        weekly_goal_status=weekly_status,
        max_drawdown_limit=goals.max_drawdown_limit,
        current_drawdown=drawdown,
        goal_status=overall_status(weekly_status, monthly_status, breached),
        achievement_badge=badge,
    )
