"""Utilities package initialization."""
from app.utils.time import (
    utc_now,
    to_exchange_time,
    exchange_date,
    exchange_hour,
    months_before,
    parse_news_time
)
from app.utils.formatting import (
    format_auto_transaction,
    format_override_transaction,
    format_trade_transaction,
    format_news_title,
    format_news_content
)

__all__ = [
    "utc_now",
    "to_exchange_time",
    "exchange_date",
    "exchange_hour",
    "months_before",
    "parse_news_time",
    "format_auto_transaction",
    "format_override_transaction",
    "format_trade_transaction",
    "format_news_title",
    "format_news_content"
]
