"""Models package initialization."""
from app.models.ticker import TickerState, DailyCandle, NewsItem

__all__ = ["TickerState", "DailyCandle", "NewsItem"]
