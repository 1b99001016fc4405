"""Ticker state models.

Field aliases are camelCase: they are the JSON contract shared by the
HTTP API and the snapshot file.
"""
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Optional


class _WireModel(BaseModel):
    """Base model serialized with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True
    )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class DailyCandle(_WireModel):
    """Finalized OHLCV summary for one trading day."""

    model_config = ConfigDict(frozen=True)

    date: str
    open: float
    close: float
    high: float
    low: float
    volume: int


class NewsItem(_WireModel):
    """News entry, either auto-generated hourly or posted by an admin."""

    title: str
    content: str
    date: str
    timestamp: Optional[str] = None
    image_url: Optional[str] = None


class TickerState(_WireModel):
    """The single persisted aggregate mutated by ticks and admin requests."""

    model_config = ConfigDict(extra="allow")

    symbol: str = "ENGINE-XIE"
    company_info: str = ""

    # Real-time daily stats
    current_price: float = 4.6
    day_open: float = 4.6
    day_high: float = 4.9
    day_low: float = 4.3
    volume: int = Field(default=0, ge=0)

    fifty_two_wk_high: float = 6.10
    fifty_two_wk_low: float = 0.50

    # Mean-reversion anchor, only set by an admin override
    actual_price: Optional[float] = None

    # Logs, newest first
    transactions: List[str] = Field(default_factory=list)
    news: List[NewsItem] = Field(default_factory=list)

    password: str = ""

    last_reset_date: str = ""
    last_news_hour: Optional[int] = None

    # Oldest first
    price_history: List[DailyCandle] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def fill_day_open(cls, data: Any) -> Any:
        """Older snapshots may lack dayOpen; open at the current price."""
        if isinstance(data, dict) and "dayOpen" not in data and "day_open" not in data:
            price = data.get("currentPrice", data.get("current_price"))
            if price is not None:
                data = {**data, "dayOpen": price}
        return data

    def public_dict(self) -> Dict[str, Any]:
        """Full snapshot without the admin password."""
        data = self.to_dict()
        data.pop("password", None)
        return data

    def quote_dict(self) -> Dict[str, Any]:
        """Partial price view."""
        return {
            "symbol": self.symbol,
            "currentPrice": self.current_price,
            "dayOpen": self.day_open,
            "dayHigh": self.day_high,
            "dayLow": self.day_low,
            "volume": self.volume,
            "fiftyTwoWkHigh": self.fifty_two_wk_high,
            "fiftyTwoWkLow": self.fifty_two_wk_low,
            "lastResetDate": self.last_reset_date,
            "lastTransaction": self.transactions[0] if self.transactions else None
        }
