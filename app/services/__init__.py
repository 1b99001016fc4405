"""Services package initialization."""
from app.services.ticker_engine import EngineConfig
from app.services.ticker_service import TickerService, load_state

__all__ = [
    "EngineConfig",
    "TickerService",
    "load_state"
]
