"""Core package initialization."""
from app.core.config import settings
from app.core.exceptions import TickerError, Unauthorized, InvalidInput, PersistenceFailure
from app.core.storage import SnapshotStore, JsonFileStore

__all__ = [
    "settings",
    "TickerError",
    "Unauthorized",
    "InvalidInput",
    "PersistenceFailure",
    "SnapshotStore",
    "JsonFileStore"
]
