"""Persistent key-value stores backing the mapping repository."""
import copy
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

from schema_bridge.exceptions import StoreError

logger = logging.getLogger(__name__)


class MappingStore(ABC):
    """Load/save contract for the persisted {id: configuration} document."""

    @abstractmethod
    def load(self) -> Optional[Dict[str, Any]]:
        """
        Return the persisted document, or None if nothing was persisted yet.

        Raises:
            StoreError: If an image exists but cannot be read or parsed
        """

    @abstractmethod
    def save(self, document: Dict[str, Any]) -> None:
        """Replace the persisted document. Failures propagate to the caller."""


class JsonFileStore(MappingStore):
    """Stores all mappings in a single JSON file."""

    def __init__(self, path: Path):
        """
        Initialize store.

        Args:
            path: JSON file holding {id: configuration}
        """
        self.path = Path(path)

    def load(self) -> Optional[Dict[str, Any]]:
        """Read the mappings file."""
        if not self.path.exists():
            logger.info(f"No mappings file at {self.path}, starting empty")
            return None

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except json.JSONDecodeError as e:
            raise StoreError(f"Malformed mappings file {self.path}: {e}") from e
        except OSError as e:
            raise StoreError(f"Could not read mappings file {self.path}: {e}") from e

        if not isinstance(document, dict):
            raise StoreError(f"Mappings file {self.path} must contain a JSON object")

        logger.info(f"Loaded {len(document)} mappings from {self.path}")
        return document

    def save(self, document: Dict[str, Any]) -> None:
        """Write the mappings file."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(document, f, indent=2)
        logger.info(f"Saved {len(document)} mappings to {self.path}")


class InMemoryStore(MappingStore):
    """Keeps the document in process memory only."""

    def __init__(self, document: Optional[Dict[str, Any]] = None):
        self.document = copy.deepcopy(document) if document is not None else None

    def load(self) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self.document) if self.document is not None else None

    def save(self, document: Dict[str, Any]) -> None:
        self.document = copy.deepcopy(document)
