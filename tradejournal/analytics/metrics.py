"""Per-trade derived metrics.

Pure functions that turn the prices of a trade into profit/loss, risk
percentage and risk/reward ratio. Invalid numeric input (NaN, inf, None)
is treated as 0 so nothing non-finite ever reaches an aggregate.
"""

import math
from typing import Iterable, Optional

from tradejournal.models import TradeDirection, TradeEntry, TradeMetrics

# Presentation thresholds for risk grading
HIGH_RISK_PERCENTAGE = 2.0
MEDIUM_RISK_PERCENTAGE = 1.0
GOOD_RISK_REWARD = 2.0
FAIR_RISK_REWARD = 1.0


def finite(value: Optional[float]) -> float:
    """Return value as a float, or 0.0 if it is missing or not finite."""
    if value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def calculate_profit_loss(
    direction: TradeDirection,
    entry_price: float,
    exit_price: float,
    position_size: float,
) -> float:
    entry = finite(entry_price)
    exit_ = finite(exit_price)
    size = finite(position_size)
    if direction == TradeDirection.BUY:
        return (exit_ - entry) * size
    return (entry - exit_) * size


def calculate_risk_percentage(
    entry_price: float,
    stop_loss: float,
    position_size: float,
    account_balance: float,
) -> float:
    """Percent of the account lost if the stop-loss is hit.

    Returns 0 when the balance or the position size is not positive.
    """
    balance = finite(account_balance)
    size = finite(position_size)
    if balance <= 0 or size <= 0:
        return 0.0
    stop_distance = abs(finite(entry_price) - finite(stop_loss))
    return stop_distance * size / balance * 100


def calculate_risk_reward_ratio(
    entry_price: float, stop_loss: float, take_profit: float
) -> float:
    entry = finite(entry_price)
    stop_distance = abs(entry - finite(stop_loss))
    if stop_distance == 0:
        return 0.0
    return abs(finite(take_profit) - entry) / stop_distance


def compute_trade_metrics(
    direction: TradeDirection,
    entry_price: float,
    exit_price: float,
    position_size: float,
    stop_loss: float,
    take_profit: float,
    account_balance: float,
) -> TradeMetrics:
    """Compute all derived fields for one trade.

    Args:
        direction: Buy or sell.
        entry_price: Entry price.
        exit_price: Exit price.
        position_size: Position size in units.
        stop_loss: Stop-loss price.
        take_profit: Take-profit price.
        account_balance: Account balance used for risk percentage.

    Returns:
        TradeMetrics with profit/loss, risk percentage and R:R.
    """
    return TradeMetrics(
        profit_loss=calculate_profit_loss(direction, entry_price, exit_price, position_size),
        risk_percentage=calculate_risk_percentage(
            entry_price, stop_loss, position_size, account_balance
        ),
        risk_reward_ratio=calculate_risk_reward_ratio(entry_price, stop_loss, take_profit),
    )


def with_metrics(trade: TradeEntry, account_balance: float) -> TradeEntry:
    """Return a copy of trade with its derived fields recomputed."""
    metrics = compute_trade_metrics(
        trade.direction,
        trade.entry_price,
        trade.exit_price,
        trade.position_size,
        trade.stop_loss,
        trade.take_profit,
        account_balance,
    )
    return trade.model_copy(update=metrics.model_dump())


def average_risk_metrics(trades: Iterable[TradeEntry]) -> tuple[float, float]:
    """Mean risk percentage and mean R:R over trades with finite metrics."""
    risks = []
    ratios = []
    for trade in trades:
        if math.isfinite(trade.risk_percentage) and math.isfinite(trade.risk_reward_ratio):
            risks.append(trade.risk_percentage)
            ratios.append(trade.risk_reward_ratio)
    if not risks:
        return 0.0, 0.0
    return math.fsum(risks) / len(risks), math.fsum(ratios) / len(ratios)


def total_profit_loss(trades: Iterable[TradeEntry]) -> float:
    return math.fsum(finite(trade.profit_loss) for trade in trades)


def win_rate(trades: list[TradeEntry]) -> float:
    """Fraction of trades with a positive P&L, 0 for no trades."""
    if not trades:
        return 0.0
    wins = sum(1 for trade in trades if finite(trade.profit_loss) > 0)
    return wins / len(trades)


def classify_risk(risk_percentage: float) -> str:
    """Grade a risk percentage as 'high', 'medium' or 'low'."""
    if risk_percentage > HIGH_RISK_PERCENTAGE:
        return "high"
    if risk_percentage > MEDIUM_RISK_PERCENTAGE:
        return "medium"
    return "low"


def classify_risk_reward(ratio: float) -> str:
    """Grade a risk/reward ratio as 'good', 'fair' or 'poor'."""
    if ratio >= GOOD_RISK_REWARD:
        return "good"
    if ratio >= FAIR_RISK_REWARD:
        return "fair"
    return "poor"
