"""Ticker state machine.

Every operation takes the state plus explicit inputs (time, random
source, config), mutates the state in place and returns a result. Nothing
here reads the wall clock, touches storage or awaits I/O; that is the
job of TickerService.
"""
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional, Protocol
import logging
import math
import secrets

from app.core.exceptions import InvalidInput, Unauthorized
from app.models.ticker import DailyCandle, NewsItem, TickerState
from app.providers.models import Photo
from app.utils.formatting import (
    format_auto_transaction,
    format_override_transaction,
    format_trade_transaction,
    format_news_title,
    format_news_content
)
from app.utils.time import (
    exchange_date,
    exchange_hour,
    months_before,
    parse_iso_date,
    parse_news_time,
    to_exchange_time,
    format_us_date
)

logger = logging.getLogger(__name__)


TRADE_TYPES = ("Buy", "Sell")


class RandomSource(Protocol):
    """Uniform draws in [0, 1). random.Random satisfies this."""

    def random(self) -> float:
        ...


@dataclass(frozen=True)
class EngineConfig:
    """Tunable parameters of the state machine."""
    timezone: str = "Asia/Shanghai"
    price_model: str = "random_walk"
    max_price_change_pct: float = 0.02
    max_volume_per_tick: int = 1000
    reversion_noise: float = 0.05
    reversion_strength: float = 0.01
    transaction_log_limit: int = 20
    news_retention_months: int = 3
    history_start_date: date = date(2024, 10, 1)

    @classmethod
    def from_settings(cls, settings) -> "EngineConfig":
        start = parse_iso_date(settings.history_start_date)
        if start is None:
            raise ValueError(f"Invalid history_start_date: {settings.history_start_date}")
        return cls(
            timezone=settings.exchange_timezone,
            price_model=settings.price_model,
            max_price_change_pct=settings.max_price_change_pct,
            max_volume_per_tick=settings.max_volume_per_tick,
            reversion_noise=settings.reversion_noise,
            reversion_strength=settings.reversion_strength,
            transaction_log_limit=settings.transaction_log_limit,
            news_retention_months=settings.news_retention_months,
            history_start_date=start
        )


def new_state(
    config: EngineConfig,
    now: datetime,
    symbol: str = "ENGINE-XIE",
    company_info: str = "",
    password: str = ""
) -> TickerState:
    """Fresh state whose trading day is the exchange date of `now`."""
    return TickerState(
        symbol=symbol,
        company_info=company_info,
        password=password,
        last_reset_date=exchange_date(now, config.timezone)
    )


# ============================================================================
# Shared helpers
# ============================================================================

def _uniform(rng: RandomSource, bound: float) -> float:
    """Uniform draw in [-bound, bound)."""
    return rng.random() * (2 * bound) - bound


def parse_number(value: Any, field: str) -> float:
    """
    Parse a request value as a finite float.

    Raises:
        InvalidInput: If the value is missing, boolean, non-numeric or not finite
    """
    if value is None or isinstance(value, bool):
        raise InvalidInput(f"Invalid {field}")
    try:
        number = float(str(value).strip()) if isinstance(value, str) else float(value)
    except (TypeError, ValueError):
        raise InvalidInput(f"Invalid {field}")
    if not math.isfinite(number):
        raise InvalidInput(f"Invalid {field}")
    return number


def check_password(state: TickerState, supplied: Any) -> None:
    """Raise Unauthorized unless `supplied` matches the state password.

    An empty state password matches nothing.
    """
    if not state.password or not isinstance(supplied, str) or not secrets.compare_digest(
        supplied.encode("utf-8"), state.password.encode("utf-8")
    ):
        raise Unauthorized("Wrong password")


def log_transaction(state: TickerState, line: str, limit: int) -> None:
    """Prepend a log line, keeping at most `limit` entries."""
    state.transactions.insert(0, line)
    del state.transactions[limit:]


def extend_day_bounds(state: TickerState) -> None:
    if state.current_price > state.day_high:
        state.day_high = state.current_price
    if state.current_price < state.day_low:
        state.day_low = state.current_price


# ============================================================================
# Price tick
# ============================================================================

def apply_random_walk(state: TickerState, rng: RandomSource, config: EngineConfig) -> None:
    """Move the price by up to ±max_price_change_pct, floored at the 52-week low."""
    change_pct = _uniform(rng, config.max_price_change_pct)
    state.current_price += state.current_price * change_pct

    # never drop below the 52-week low; the high is informational only
    if state.current_price < state.fifty_two_wk_low:
        state.current_price = state.fifty_two_wk_low


def apply_mean_reversion(state: TickerState, rng: RandomSource, config: EngineConfig) -> None:
    """Small noise plus a pull toward the admin-set anchor, floored at zero."""
    state.current_price += _uniform(rng, config.reversion_noise)

    if state.actual_price is not None:
        state.current_price += (state.actual_price - state.current_price) * config.reversion_strength

    if state.current_price < 0:
        state.current_price = 0.0


PRICE_MODELS = {
    "random_walk": apply_random_walk,
    "mean_reversion": apply_mean_reversion,
}


def tick(
    state: TickerState,
    now: datetime,
    rng: RandomSource,
    config: EngineConfig
) -> TickerState:
    """
    Apply one scheduled price update, then the daily rollover check.

    Args:
        state: Ticker state (mutated)
        now: Current moment (aware)
        rng: Uniform random source
        config: Engine parameters; `price_model` picks the update rule

    Returns:
        The same state object
    """
    PRICE_MODELS[config.price_model](state, rng, config)
    extend_day_bounds(state)

    state.volume += int(rng.random() * config.max_volume_per_tick)

    local_now = to_exchange_time(now, config.timezone)
    log_transaction(
        state,
        format_auto_transaction(state.current_price, local_now),
        config.transaction_log_limit
    )

    daily_rollover(state, now, config)
    return state


# ============================================================================
# Daily rollover
# ============================================================================

def daily_rollover(
    state: TickerState,
    now: datetime,
    config: EngineConfig
) -> Optional[DailyCandle]:
    """
    Close the previous trading day if the exchange date changed.

    At most one step per call: days the process was down for get no
    candles. Days before `history_start_date` are reset but not recorded.
    The new day opens at the previous close.

    Returns:
        The appended candle, or None (no date change or date not recorded)
    """
    today = exchange_date(now, config.timezone)
    if today == state.last_reset_date:
        return None

    candle = None
    previous = parse_iso_date(state.last_reset_date)
    if previous is not None and previous >= config.history_start_date:
        candle = DailyCandle(
            date=state.last_reset_date,
            open=state.day_open,
            close=state.current_price,
            high=state.day_high,
            low=state.day_low,
            volume=state.volume
        )
        state.price_history.append(candle)

    prev_close = state.current_price
    state.day_open = prev_close
    state.day_high = prev_close
    state.day_low = prev_close
    state.volume = 0

    logger.info(
        f"Rolled over {state.last_reset_date or '<unset>'} -> {today}"
        f"{' (candle recorded)' if candle else ''}"
    )
    state.last_reset_date = today
    return candle


# ============================================================================
# News
# ============================================================================

def prune_news(state: TickerState, now: datetime, config: EngineConfig) -> int:
    """
    Drop news older than the retention window.

    Each item is aged by its timestamp, falling back to its date; items
    with neither parseable are dropped.

    Returns:
        Number of items removed
    """
    cutoff = months_before(to_exchange_time(now, config.timezone), config.news_retention_months)

    kept = []
    for item in state.news:
        item_time = parse_news_time(item.timestamp or item.date, config.timezone)
        if item_time is not None and item_time >= cutoff:
            kept.append(item)

    removed = len(state.news) - len(kept)
    state.news = kept
    return removed


def _make_news_item(
    title: str,
    content: str,
    now: datetime,
    config: EngineConfig,
    image_url: Optional[str] = None
) -> NewsItem:
    local_now = to_exchange_time(now, config.timezone)
    return NewsItem(
        title=title,
        content=content,
        date=format_us_date(local_now),
        timestamp=local_now.isoformat(),
        image_url=image_url
    )


def news_due(state: TickerState, now: datetime, config: EngineConfig) -> bool:
    """
    True when the exchange hour differs from the last news hour.

    An unset last hour is seeded to the previous hour so the first
    check after startup always produces news.
    """
    current_hour = exchange_hour(now, config.timezone)
    if state.last_news_hour is None:
        state.last_news_hour = current_hour - 1
    return current_hour != state.last_news_hour


def add_hourly_news(
    state: TickerState,
    now: datetime,
    photo: Optional[Photo],
    config: EngineConfig
) -> NewsItem:
    """Prepend the automated hourly item and mark the hour as done."""
    local_now = to_exchange_time(now, config.timezone)
    item = _make_news_item(
        format_news_title(local_now),
        format_news_content(state.symbol, photo.photographer if photo else None),
        now,
        config,
        image_url=photo.image_url if photo else None
    )

    state.news.insert(0, item)
    prune_news(state, now, config)
    state.last_news_hour = local_now.hour
    return item


def post_news(
    state: TickerState,
    password: Any,
    title: Any,
    content: Any,
    now: datetime,
    config: EngineConfig,
    media: Any = None,
    require_password: bool = True
) -> NewsItem:
    """
    Prepend a manually posted news item.

    Raises:
        Unauthorized: Password required and wrong
        InvalidInput: Title or content missing or not text, or media not text
    """
    if require_password:
        check_password(state, password)

    if not isinstance(title, str) or not isinstance(content, str) or not title.strip() or not content.strip():
        raise InvalidInput("title & content needed")
    if media is not None and not isinstance(media, str):
        raise InvalidInput("Invalid media")

    item = _make_news_item(title, content, now, config, image_url=media or None)
    state.news.insert(0, item)
    prune_news(state, now, config)
    return item


# ============================================================================
# Admin override and transactions
# ============================================================================

def admin_override(
    state: TickerState,
    password: Any,
    new_price: Any,
    now: datetime,
    config: EngineConfig
) -> float:
    """
    Force the live price.

    In the mean-reversion model the anchor moves too, so the price stays
    at the new level instead of drifting back.

    Raises:
        Unauthorized: Wrong password (checked first)
        InvalidInput: Price is not a finite number

    Returns:
        The accepted price
    """
    check_password(state, password)
    value = parse_number(new_price, "price")

    state.current_price = value
    if config.price_model == "mean_reversion":
        state.actual_price = value
    extend_day_bounds(state)

    log_transaction(
        state,
        format_override_transaction(value, to_exchange_time(now, config.timezone)),
        config.transaction_log_limit
    )
    return value


def record_transaction(
    state: TickerState,
    trade_type: Any,
    quantity: Any,
    price: Any,
    now: datetime,
    config: EngineConfig
) -> str:
    """
    Log a Buy/Sell. The price is not affected.

    Raises:
        InvalidInput: Unknown type, non-positive quantity or negative price

    Returns:
        The log line
    """
    normalized = str(trade_type or "").strip().capitalize()
    if normalized not in TRADE_TYPES:
        raise InvalidInput(f"type must be one of {', '.join(TRADE_TYPES)}")

    qty = parse_number(quantity, "quantity")
    if qty <= 0:
        raise InvalidInput("Invalid quantity")

    value = parse_number(price, "price")
    if value < 0:
        raise InvalidInput("Invalid price")

    line = format_trade_transaction(normalized, qty, value, to_exchange_time(now, config.timezone))
    log_transaction(state, line, config.transaction_log_limit)
    return line
