"""Data models for the trade journal."""

from tradejournal.models.analytics import (
    AchievementBadge,
    AchievementBadgeStatus,
    AddTradeResult,
    CalendarDayPerformance,
    CalendarDayStatus,
    FTMOAnalytics,
    GoalStatus,
    HomepageSummaryMetrics,
    PerformanceGoalsSummary,
    PerformanceSummary,
    PeriodicPerformanceData,
    TradeMetrics,
    TradeStatistics,
    WeekPerformanceChange,
)
from tradejournal.models.profile import PerformanceGoals, UserProfile
from tradejournal.models.trade import (
    TradeChecklist,
    TradeChecklistItem,
    TradeDirection,
    TradeEntry,
    TradeImage,
    TradeRequest,
    default_checklist,
)

__all__ = [
    "AchievementBadge",
    "AchievementBadgeStatus",
    "AddTradeResult",
    "CalendarDayPerformance",
    "CalendarDayStatus",
    "FTMOAnalytics",
    "GoalStatus",
    "HomepageSummaryMetrics",
    "PerformanceGoals",
    "PerformanceGoalsSummary",
    "PerformanceSummary",
    "PeriodicPerformanceData",
    "TradeChecklist",
    "TradeChecklistItem",
    "TradeDirection",
    "TradeEntry",
    "TradeImage",
    "TradeMetrics",
    "TradeRequest",
    "TradeStatistics",
    "UserProfile",
    "WeekPerformanceChange",
    "default_checklist",
]
