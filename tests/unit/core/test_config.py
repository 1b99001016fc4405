"""Unit tests for Settings."""
import pytest
from pydantic import ValidationError

from app.core.config import Settings, PEXELS_PLACEHOLDER_KEY


@pytest.mark.unit
class TestSettings:
    """Test settings defaults and validation."""

    def test_defaults(self):
        """✅ Defaults match the reference deployment."""
        settings = Settings(_env_file=None)

        assert settings.port == 3000
        assert settings.exchange_timezone == "Asia/Shanghai"
        assert settings.price_model == "random_walk"
        assert settings.tick_interval_seconds == 60
        assert settings.history_start_date == "2024-10-01"

    def test_port_from_environment(self, monkeypatch):
        """✅ PORT env var is honoured."""
        monkeypatch.setenv("PORT", "8080")
        assert Settings(_env_file=None).port == 8080

    def test_log_level_normalized(self):
        """✅ Lower-case level accepted."""
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    @pytest.mark.parametrize("field,value", [
        ("log_level", "LOUD"),
        ("price_model", "martingale"),
        ("exchange_timezone", "Mars/Olympus"),
        ("tick_interval_seconds", 0),
        ("transaction_log_limit", 0),
    ])
    def test_invalid_values(self, field, value):
        """✅ Bad values rejected."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **{field: value})

    def test_cors_origins_list(self):
        """✅ Comma-separated origins parsed."""
        settings = Settings(_env_file=None, cors_origins="http://a.com, http://b.com,")
        assert settings.cors_origins_list == ["http://a.com", "http://b.com"]

    @pytest.mark.parametrize("key,enabled", [
        (None, False),
        ("", False),
        (PEXELS_PLACEHOLDER_KEY, False),
        ("real-key", True),
    ])
    def test_image_provider_enabled(self, key, enabled):
        """✅ Placeholder key counts as missing."""
        assert Settings(_env_file=None, pexels_api_key=key).image_provider_enabled is enabled
