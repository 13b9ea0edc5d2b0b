"""Equity curve and drawdown."""

from tradejournal.analytics.metrics import finite
from tradejournal.models import TradeEntry


def chronological(trades: list[TradeEntry]) -> list[TradeEntry]:
    """Trades by time, then by the order they were entered."""
    return sorted(trades, key=lambda trade: (trade.date, trade.sequence, trade.id))


def equity_curve(trades: list[TradeEntry], account_balance: float) -> list[float]:
    """Starting balance followed by the equity after each trade."""
    equity = finite(account_balance)
    curve = [equity]
    for trade in chronological(trades):
        equity += finite(trade.profit_loss)
        curve.append(equity)
    return curve


def max_drawdown(curve: list[float]) -> float:
    """Largest peak-to-trough decline as a fraction of the peak.

    Points reached while the running peak is not positive are ignored,
    so an account without a balance reports no drawdown until it has
    made money.
    """
    peak = None
    worst = 0.0
    for equity in curve:
        if peak is None or equity > peak:
            peak = equity
        if peak > 0:
            worst = max(worst, (peak - equity) / peak)
    return worst
