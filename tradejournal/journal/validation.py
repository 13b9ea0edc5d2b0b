"""Validation of trade requests before they reach the store."""

import math

from tradejournal.models import TradeDirection, TradeRequest


def _positive(value: float) -> bool:
    return math.isfinite(value) and value > 0


def validate_trade_request(request: TradeRequest) -> list[str]:
    """Validate a trade request and return the list of problems.

    Args:
        request: Trade to validate.

    Returns:
        Human readable error messages, empty if the request is valid.
    """
    errors = []

    if not request.asset.strip():
        errors.append("Asset symbol is required")

    if not _positive(request.entry_price):
        errors.append("Entry price must be a valid positive number")
    if not _positive(request.exit_price):
        errors.append("Exit price must be a valid positive number")
    if not _positive(request.position_size):
        errors.append("Position size must be a valid number greater than zero")

    entry_ok = _positive(request.entry_price)
    is_buy = request.direction == TradeDirection.BUY

    if not _positive(request.stop_loss):
        errors.append("Stop loss is required and must be a valid positive number")
    elif entry_ok:
        if is_buy and request.stop_loss >= request.entry_price:
            errors.append("For Buy trades, stop loss must be below entry price")
        elif not is_buy and request.stop_loss <= request.entry_price:
            errors.append("For Sell trades, stop loss must be above entry price")

    if not _positive(request.take_profit):
        errors.append("Take profit is required and must be a valid positive number")
    elif entry_ok:
        if is_buy and request.take_profit <= request.entry_price:
            errors.append("For Buy trades, take profit must be above entry price")
        elif not is_buy and request.take_profit >= request.entry_price:
            errors.append("For Sell trades, take profit must be below entry price")

    return errors
