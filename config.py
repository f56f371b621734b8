"""Application configuration."""
import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)


def _env_number(name: str, default, cast):
    """Read a numeric env variable, falling back to the default if it is invalid."""
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}, using {default}")
        return default


@dataclass
class StorageConfig:
    """Where mapping configurations are persisted."""

    path: str = "./mappings.json"

    @classmethod
    def from_env(cls) -> "StorageConfig":
        """Load config from environment variables."""
        return cls(path=os.getenv("SCHEMA_BRIDGE_STORAGE_PATH", "./mappings.json"))


@dataclass
class SuggestConfig:
    """Mapping suggestion defaults."""

    confidence_threshold: float = 0.7

    @classmethod
    def from_env(cls) -> "SuggestConfig":
        """Load config from environment variables."""
        return cls(
            confidence_threshold=_env_number("SCHEMA_BRIDGE_CONFIDENCE_THRESHOLD", 0.7, float),
        )


@dataclass
class FetchConfig:
    """Remote schema retrieval."""

    timeout: int = 30  # seconds

    @classmethod
    def from_env(cls) -> "FetchConfig":
        """Load config from environment variables."""
        return cls(timeout=_env_number("SCHEMA_BRIDGE_FETCH_TIMEOUT", 30, int))


@dataclass
class AppConfig:
    """Application configuration."""

    storage: StorageConfig = None
    suggest: SuggestConfig = None
    fetch: FetchConfig = None
    log_level: str = "WARNING"

    def __post_init__(self):
        """Fill in default sections."""
        if self.storage is None:
            self.storage = StorageConfig()
        if self.suggest is None:
            self.suggest = SuggestConfig()
        if self.fetch is None:
            self.fetch = FetchConfig()

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load config from environment variables."""
        return cls(
            storage=StorageConfig.from_env(),
            suggest=SuggestConfig.from_env(),
            fetch=FetchConfig.from_env(),
            log_level=os.getenv("SCHEMA_BRIDGE_LOG_LEVEL", "WARNING").upper(),
        )


# Global instance
app_config = AppConfig.from_env()
