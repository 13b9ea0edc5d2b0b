"""Derived analytics result models.

None of these are persisted; they are recomputed from the trade list
and profile on every query.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from tradejournal.models.trade import TradeEntry


class CalendarDayStatus(str, Enum):
    PROFIT = "profit"
    LOSS = "loss"
    NEUTRAL = "neutral"


class GoalStatus(str, Enum):
    ON_TRACK = "onTrack"
    OVER_TARGET = "overTarget"
    UNDER_TARGET = "underTarget"
    AT_LIMIT = "atLimit"


class AchievementBadgeStatus(str, Enum):
    TARGET_REACHED = "targetReached"
    MILESTONE = "milestone"
    GOAL_ACHIEVED = "goalAchieved"


class TradeMetrics(BaseModel):
    """Per-trade derived fields."""

    profit_loss: float = 0.0
    risk_percentage: float = 0.0
    risk_reward_ratio: float = 0.0

    model_config = {"frozen": True}


class CalendarDayPerformance(BaseModel):
    """Performance of a single calendar day with at least one trade."""

    day: int = Field(..., ge=1, le=31)
    total_profit_loss: float
    trades: list[TradeEntry]
    average_risk_percentage: float
    average_risk_reward_ratio: float
    status: CalendarDayStatus

    model_config = {"frozen": True}


class PeriodicPerformanceData(BaseModel):
    """Rollup of one week or month bucket."""

    period: str = Field(..., description="Period key, e.g. 2024-W05 or 2024-02")
    profit_loss: float
    num_trades: int = Field(..., ge=0)
    win_rate: float = Field(..., ge=0, le=1)
    percentage_return: float
    average_risk_percentage: float
    average_risk_reward_ratio: float

    model_config = {"frozen": True}


class PerformanceSummary(BaseModel):
    total_profit_loss: float = 0.0
    average_win_rate: float = 0.0
    total_trades: int = 0
    cumulative_percentage_return: float = 0.0
    weekly_performance: list[PeriodicPerformanceData] = Field(default_factory=list)
    monthly_performance: list[PeriodicPerformanceData] = Field(default_factory=list)
    average_risk_percentage: float = 0.0
    average_risk_reward_ratio: float = 0.0

    model_config = {"frozen": True}


class FTMOAnalytics(BaseModel):
    """Prop-firm style evaluation of the trade history."""

    max_daily_loss: float = 0.0
    max_daily_profit: float = 0.0
    profit_target_progress: float = 0.0
    consistency_rate: float = 0.0
    average_risk_percentage: float = 0.0
    average_risk_reward_ratio: float = 0.0
    overall_compliance: bool = False

    model_config = {"frozen": True}


class AchievementBadge(BaseModel):
    title: str
    status: AchievementBadgeStatus
    description: str
    timestamp: int = Field(..., description="Event time as nanoseconds since the epoch")

    model_config = {"frozen": True}


class PerformanceGoalsSummary(BaseModel):
    monthly_profit_goal: float = 0.0
    monthly_profit_progress: float = 0.0
    weekly_profit_target: float = 0.0
    current_week_profit: float = 0.0
    weekly_progress: float = 0.0
    weekly_goal_status: GoalStatus = GoalStatus.ON_TRACK
    max_drawdown_limit: float = 0.0
    current_drawdown: float = 0.0
    goal_status: GoalStatus = GoalStatus.ON_TRACK
    achievement_badge: Optional[AchievementBadge] = None

    model_config = {"frozen": True}


class WeekPerformanceChange(BaseModel):
    profit_loss: float = 0.0
    percentage_change: float = 0.0
    comparison_to_previous_week: float = 0.0
    week_range: tuple[int, int] = Field(..., description="[start, end) in epoch nanoseconds")

    model_config = {"frozen": True}


class HomepageSummaryMetrics(BaseModel):
    total_profit_loss: float = 0.0
    win_rate: float = 0.0
    last_week_change: WeekPerformanceChange
    mini_equity_curve: list[float] = Field(default_factory=list)
    ftmo_analytics: FTMOAnalytics = Field(default_factory=FTMOAnalytics)
    average_risk_percentage: float = 0.0
    average_risk_reward_ratio: float = 0.0

    model_config = {"frozen": True}


class TradeStatistics(BaseModel):
    total_trades: int = 0
    total_profit: float = 0.0
    winning_trades: int = 0
    losing_trades: int = 0
    win_rate: float = 0.0
    best_trade: Optional[float] = None
    worst_trade: Optional[float] = None
    percentage_profit_loss: float = 0.0

    model_config = {"frozen": True}


class AddTradeResult(BaseModel):
    """Result of adding a trade: the stored entry plus refreshed goals."""

    trade: TradeEntry
    updated_goals: PerformanceGoalsSummary

    model_config = {"frozen": True}
