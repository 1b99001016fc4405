"""Ticker service: owns the live state and serializes every mutation."""
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional
import asyncio
import logging
import random

from app.core.config import Settings
from app.core.exceptions import PersistenceFailure
from app.core.storage import JsonFileStore, SnapshotStore
from app.models.ticker import NewsItem, TickerState
from app.providers import ImageProvider, NullImageProvider
from app.providers.models import Photo
from app.services import ticker_engine
from app.services.ticker_engine import EngineConfig, RandomSource
from app.utils.time import utc_now

logger = logging.getLogger(__name__)


def load_state(
    store: SnapshotStore,
    config: EngineConfig,
    now: datetime,
    symbol: str = "ENGINE-XIE",
    company_info: str = "",
    password: str = ""
) -> TickerState:
    """Last snapshot if readable, otherwise a fresh state."""
    try:
        state = store.load()
    except PersistenceFailure as e:
        logger.error(f"Snapshot unreadable, starting from defaults: {e}", exc_info=True)
        state = None

    if state is None:
        logger.info("Creating fresh ticker state")
        state = ticker_engine.new_state(
            config, now, symbol=symbol, company_info=company_info, password=password
        )
    elif not state.password:
        logger.warning("Snapshot has no admin password; using the configured one")
        state.password = password
    return state


class TickerService:
    """Single writer for the ticker state.

    All mutations run under one asyncio.Lock and are followed by a
    snapshot save. The image lookup for hourly news happens outside
    the lock so price ticks are never held up by the network.
    """

    def __init__(
        self,
        state: TickerState,
        store: SnapshotStore,
        config: Optional[EngineConfig] = None,
        image_provider: Optional[ImageProvider] = None,
        clock: Callable[[], datetime] = utc_now,
        rng: Optional[RandomSource] = None,
        image_query: str = "finance",
        image_timeout: float = 10.0,
        news_requires_password: bool = True
    ):
        self.state = state
        self.store = store
        self.config = config or EngineConfig()
        self.image_provider = image_provider or NullImageProvider()
        self.clock = clock
        self.rng = rng or random.Random()
        self.image_query = image_query
        self.image_timeout = image_timeout
        self.news_requires_password = news_requires_password
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        image_provider: Optional[ImageProvider] = None,
        store: Optional[SnapshotStore] = None,
        clock: Callable[[], datetime] = utc_now
    ) -> "TickerService":
        """Load (or create) the state described by the settings."""
        config = EngineConfig.from_settings(settings)
        store = store or JsonFileStore(settings.data_file)
        state = load_state(
            store,
            config,
            clock(),
            symbol=settings.symbol,
            company_info=settings.company_info,
            password=settings.admin_password
        )
        return cls(
            state,
            store,
            config=config,
            image_provider=image_provider,
            clock=clock,
            image_query=settings.image_query,
            image_timeout=settings.image_timeout_seconds,
            news_requires_password=settings.news_requires_password
        )

    def _persist(self):
        """Save the snapshot; failures are logged and never raised."""
        try:
            self.store.save(self.state)
        except PersistenceFailure as e:
            logger.error(f"Snapshot save failed: {e}", exc_info=True)

    # ------------------------------------------------------------------
    # Scheduled jobs
    # ------------------------------------------------------------------

    async def tick(self) -> float:
        """Apply one price update (and rollover check), then persist."""
        async with self._lock:
            ticker_engine.tick(self.state, self.clock(), self.rng, self.config)
            self._persist()
            price = self.state.current_price
        logger.debug(f"Price now {price:.2f}")
        return price

    async def check_news(self) -> Optional[NewsItem]:
        """
        Post the hourly news item if the exchange hour changed.

        Returns:
            The new item, or None if no news was due
        """
        async with self._lock:
            due = ticker_engine.news_due(self.state, self.clock(), self.config)
            if not due:
                return None
            logger.info(f"Hour changed from {self.state.last_news_hour}. Creating news...")

        photo = await self._fetch_photo()

        async with self._lock:
            now = self.clock()
            # Another check may have posted while the image was loading
            if not ticker_engine.news_due(self.state, now, self.config):
                return None
            item = ticker_engine.add_hourly_news(self.state, now, photo, self.config)
            self._persist()

        logger.info(f"Posted news with image: {item.image_url}")
        return item

    async def _fetch_photo(self) -> Optional[Photo]:
        """Bounded image lookup; any failure means no image."""
        try:
            return await asyncio.wait_for(
                self.image_provider.search(self.image_query),
                timeout=self.image_timeout
            )
        except asyncio.TimeoutError:
            logger.warning(f"Image lookup timed out after {self.image_timeout}s")
        except Exception as e:
            logger.warning(f"Image lookup failed: {e}")
        return None

    # ------------------------------------------------------------------
    # Admin / client requests
    # ------------------------------------------------------------------

    async def override_price(self, password: Any, new_price: Any) -> float:
        async with self._lock:
            value = ticker_engine.admin_override(
                self.state, password, new_price, self.clock(), self.config
            )
            self._persist()
        logger.info(f"Price overridden to {value:.2f}")
        return value

    async def post_news(
        self,
        password: Any,
        title: Any,
        content: Any,
        media: Any = None
    ) -> NewsItem:
        async with self._lock:
            item = ticker_engine.post_news(
                self.state,
                password,
                title,
                content,
                self.clock(),
                self.config,
                media=media,
                require_password=self.news_requires_password
            )
            self._persist()
        logger.info(f"Posted manual news: {item.title}")
        return item

    async def record_transaction(self, trade_type: Any, quantity: Any, price: Any) -> str:
        async with self._lock:
            line = ticker_engine.record_transaction(
                self.state, trade_type, quantity, price, self.clock(), self.config
            )
            self._persist()
        logger.info(f"Recorded transaction: {line}")
        return line

    # ------------------------------------------------------------------
    # Read views
    # ------------------------------------------------------------------

    def snapshot(self) -> Dict[str, Any]:
        return self.state.public_dict()

    def quote(self) -> Dict[str, Any]:
        return self.state.quote_dict()

    def history(self) -> List[Dict[str, Any]]:
        return [candle.to_dict() for candle in self.state.price_history]

    def news(self) -> List[Dict[str, Any]]:
        return [item.to_dict() for item in self.state.news]
