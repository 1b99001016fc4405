"""Unit tests for ticker models."""
import pytest
from pydantic import ValidationError

from app.models.ticker import DailyCandle, NewsItem, TickerState


@pytest.mark.unit
class TestTickerState:
    """Test TickerState parsing and views."""

    def test_accepts_camel_case(self):
        """✅ Wire names populate snake_case attributes."""
        state = TickerState.model_validate({
            "currentPrice": 5.0,
            "dayOpen": 4.9,
            "lastNewsHour": 7,
            "news": [{"title": "t", "content": "c", "date": "10/5/2024"}]
        })

        assert state.current_price == 5.0
        assert state.day_open == 4.9
        assert state.last_news_hour == 7
        assert state.news[0].image_url is None

    def test_missing_day_open_uses_current_price(self):
        """✅ Older snapshots without dayOpen open at the current price."""
        state = TickerState.model_validate({"currentPrice": 3.3})
        assert state.day_open == 3.3

    def test_unknown_fields_preserved(self):
        """✅ Extra snapshot keys survive a round trip."""
        state = TickerState.model_validate({"currentPrice": 1.0, "legacyField": [1, 2]})
        assert state.to_dict()["legacyField"] == [1, 2]

    def test_negative_volume_rejected(self):
        """✅ Volume must be non-negative."""
        with pytest.raises(ValidationError):
            TickerState(volume=-1)

    def test_public_dict_hides_password(self):
        """✅ Password stripped from the public view."""
        data = TickerState(password="pw").public_dict()

        assert "password" not in data
        assert "fiftyTwoWkHigh" in data
        assert "companyInfo" in data

    def test_quote_latest_transaction(self):
        """✅ Quote reports the newest log line."""
        state = TickerState(transactions=["new", "old"])
        assert state.quote_dict()["lastTransaction"] == "new"


@pytest.mark.unit
class TestCandleAndNews:
    """Test DailyCandle and NewsItem."""

    def test_candle_is_immutable(self):
        """✅ Finalized candles cannot be edited."""
        candle = DailyCandle(date="2024-10-05", open=1, close=2, high=3, low=0.5, volume=10)

        with pytest.raises(ValidationError):
            candle.close = 9

    def test_news_serializes_image_url(self):
        """✅ imageUrl key on the wire."""
        item = NewsItem(title="t", content="c", date="d", image_url="u")
        assert item.to_dict()["imageUrl"] == "u"
