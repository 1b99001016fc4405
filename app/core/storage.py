"""Snapshot store for the persisted ticker state."""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional
from pydantic import ValidationError
import json
import logging
import os

from app.core.exceptions import PersistenceFailure
from app.models.ticker import TickerState

logger = logging.getLogger(__name__)


class SnapshotStore(ABC):
    """Whole-state snapshot persistence."""

    @abstractmethod
    def save(self, state: TickerState) -> None:
        """
        Write the full state.

        Raises:
            PersistenceFailure: If the snapshot cannot be written
        """
        pass

    @abstractmethod
    def load(self) -> Optional[TickerState]:
        """
        Read the last snapshot.

        Returns:
            Stored state, or None if nothing has been saved yet

        Raises:
            PersistenceFailure: If a snapshot exists but cannot be read
        """
        pass


class JsonFileStore(SnapshotStore):
    """Snapshot kept as one pretty-printed JSON document."""

    def __init__(self, path: str):
        self.path = Path(path)

    def save(self, state: TickerState) -> None:
        # Write beside the target, then swap
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            if self.path.parent and not self.path.parent.exists():
                self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(state.to_dict(), indent=2), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            raise PersistenceFailure(f"Error writing {self.path}: {e}") from e

    def load(self) -> Optional[TickerState]:
        if not self.path.exists():
            logger.info(f"No snapshot at {self.path}")
            return None

        try:
            raw = self.path.read_text(encoding="utf-8")
            state = TickerState.model_validate(json.loads(raw))
        except (OSError, ValueError, ValidationError) as e:
            raise PersistenceFailure(f"Error reading {self.path}: {e}") from e

        logger.info(f"Loaded snapshot from {self.path}")
        return state
