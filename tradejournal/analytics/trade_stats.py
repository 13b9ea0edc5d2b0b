"""Headline trade statistics and simple trade filters."""

from tradejournal.analytics.metrics import finite, total_profit_loss, win_rate
from tradejournal.models import TradeEntry, TradeStatistics, UserProfile


def filter_trades_by_tag(trades: list[TradeEntry], tag: str) -> list[TradeEntry]:
    return [trade for trade in trades if tag in trade.tags]


def percentage_profit_loss(trades: list[TradeEntry], profile: UserProfile | None) -> float:
    """Total P&L as a percentage of the starting balance."""
    if profile is None or profile.account_balance <= 0:
        return 0.0
    return total_profit_loss(trades) / profile.account_balance * 100


def get_trade_statistics(
    trades: list[TradeEntry], profile: UserProfile | None = None
) -> TradeStatistics:
    if not trades:
        return TradeStatistics()

    results = [finite(trade.profit_loss) for trade in trades]
    return TradeStatistics(
        total_trades=len(trades),
        total_profit=total_profit_loss(trades),
        winning_trades=sum(1 for pnl in results if pnl > 0),
        losing_trades=sum(1 for pnl in results if pnl < 0),
        win_rate=win_rate(trades),
        best_trade=max(results),
        worst_trade=min(results),
        percentage_profit_loss=percentage_profit_loss(trades, profile),
    )
