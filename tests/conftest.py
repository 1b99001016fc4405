"""Shared pytest fixtures for ticker tests."""
import pytest
import pytz
from datetime import date, datetime, timezone
from typing import List, Optional

from app.models.ticker import NewsItem, TickerState
from app.services.ticker_engine import EngineConfig


PASSWORD = "s3cret"
SHANGHAI = pytz.timezone("Asia/Shanghai")


class FixedClock:
    """Injectable clock; move it by assigning `now`."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class ScriptedRandom:
    """Random source replaying a fixed sequence of draws (cycled)."""

    def __init__(self, values: List[float]):
        self.values = list(values)
        self.calls = 0

    def random(self) -> float:
        value = self.values[self.calls % len(self.values)]
        self.calls += 1
        return value


def shanghai(year: int, month: int, day: int, hour: int = 0, minute: int = 0, second: int = 0) -> datetime:
    """UTC moment for an Asia/Shanghai wall time."""
    local = SHANGHAI.localize(datetime(year, month, day, hour, minute, second))
    return local.astimezone(timezone.utc)


def create_state(
    current_price: float = 4.6,
    day_open: float = 4.6,
    day_high: float = 4.9,
    day_low: float = 4.3,
    volume: int = 0,
    fifty_two_wk_low: float = 0.5,
    last_reset_date: str = "2024-10-05",
    last_news_hour: Optional[int] = None,
    news: Optional[List[NewsItem]] = None,
    password: str = PASSWORD
) -> TickerState:
    """Factory function to create TickerState instances for testing."""
    return TickerState(
        symbol="ENGINE-XIE",
        company_info="Test ticker",
        current_price=current_price,
        day_open=day_open,
        day_high=day_high,
        day_low=day_low,
        volume=volume,
        fifty_two_wk_high=6.10,
        fifty_two_wk_low=fifty_two_wk_low,
        password=password,
        last_reset_date=last_reset_date,
        last_news_hour=last_news_hour,
        news=news or []
    )


@pytest.fixture
def engine_config():
    """Default random-walk config on the Shanghai calendar."""
    return EngineConfig(
        timezone="Asia/Shanghai",
        price_model="random_walk",
        transaction_log_limit=20,
        news_retention_months=3,
        history_start_date=date(2024, 10, 1)
    )


@pytest.fixture
def reversion_config():
    """Mean-reversion config."""
    return EngineConfig(price_model="mean_reversion")


@pytest.fixture
def state():
    """State on trading day 2024-10-05."""
    return create_state()


@pytest.fixture
def morning():
    """2024-10-05 10:00 in Shanghai."""
    return shanghai(2024, 10, 5, 10)
