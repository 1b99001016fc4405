"""Log line and news text formatting utilities."""
from datetime import datetime
from typing import Optional

from app.utils.time import format_us_datetime, format_us_time


def format_price(price: float) -> str:
    """Two-decimal price string."""
    return f"{price:.2f}"


def format_auto_transaction(price: float, moment: datetime) -> str:
    """Log line for a scheduled price tick."""
    return f"Auto => {format_price(price)} at {format_us_time(moment)}"


def format_override_transaction(price: float, moment: datetime) -> str:
    """Log line for an admin price override."""
    return f"Override => {format_price(price)} at {format_us_time(moment)}"


def format_trade_transaction(
    trade_type: str,
    quantity: float,
    price: float,
    moment: datetime
) -> str:
    """
    Log line for a recorded Buy/Sell.

    Whole quantities are shown without a decimal part.

    Args:
        trade_type: "Buy" or "Sell"
        quantity: Number of shares
        price: Trade price
        moment: Exchange-local time of the trade

    Returns:
        Formatted log line, e.g. "Buy 10 @ 4.60 at 9:30:00 AM"
    """
    qty = int(quantity) if float(quantity).is_integer() else quantity
    return f"{trade_type} {qty} @ {format_price(price)} at {format_us_time(moment)}"


def format_news_title(moment: datetime) -> str:
    return f"Hourly Update: {format_us_datetime(moment)}"


def format_news_content(symbol: str, photographer: Optional[str]) -> str:
    return f"Automated news from {symbol}. Photographer: {photographer or 'Anonymous'}"
