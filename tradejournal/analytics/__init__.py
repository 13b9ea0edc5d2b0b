"""Trade analytics engine.

Pure, synchronous computations over a trade list and a user profile.
"""

from tradejournal.analytics.calendar import get_calendar_performance, get_trades_for_day
from tradejournal.analytics.ftmo import get_ftmo_analytics
from tradejournal.analytics.goals import get_performance_goals_summary
from tradejournal.analytics.homepage import get_homepage_summary
from tradejournal.analytics.metrics import (
    classify_risk,
    classify_risk_reward,
    compute_trade_metrics,
    with_metrics,
)
from tradejournal.analytics.periodic import get_performance_summary
from tradejournal.analytics.trade_stats import (
    filter_trades_by_tag,
    get_trade_statistics,
    percentage_profit_loss,
)

__all__ = [
    "classify_risk",
    "classify_risk_reward",
    "compute_trade_metrics",
    "filter_trades_by_tag",
    "get_calendar_performance",
    "get_ftmo_analytics",
    "get_homepage_summary",
    "get_performance_goals_summary",
    "get_performance_summary",
    "get_trade_statistics",
    "get_trades_for_day",
    "percentage_profit_loss",
    "with_metrics",
]
