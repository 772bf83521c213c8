"""
Configuration for the Plausible Stats client.
"""
import logging
import os
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://plausible.io"
QUERY_PATH = "/api/v2/query"
DEFAULT_TIMEOUT_SECONDS = 30.0

# Documented Stats API quota. Informational only, never enforced.
RATE_LIMIT_PER_HOUR = 600


@dataclass(frozen=True)
class PlausibleConfig:
    """Connection settings for a Plausible instance.

    Usage:
        config = PlausibleConfig(api_key="your-api-key")
        client = PlausibleClient.from_config(config)

        # Self-hosted instance
        config = PlausibleConfig(
            api_key="your-api-key",
            base_url="https://analytics.example.com",
        )
    """

    api_key: str
    base_url: Optional[str] = None  # None means DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT_SECONDS

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not self.api_key or not self.api_key.strip():
            raise ConfigError("Plausible API key must not be empty")

        # frozen dataclass, so normalise through object.__setattr__
        base_url = self.base_url or DEFAULT_BASE_URL
        object.__setattr__(self, "base_url", base_url.rstrip("/"))

        if not self.base_url.startswith("https://"):
            logger.warning(
                f"Plausible base URL {self.base_url} is not HTTPS; "
                f"the API key will be sent unencrypted"
            )

    @property
    def query_url(self) -> str:
        """Full URL of the Stats API v2 query endpoint."""
        return f"{self.base_url}{QUERY_PATH}"

    @classmethod
    def from_env(cls) -> "PlausibleConfig":
        """Build a config from PLAUSIBLE_API_KEY and PLAUSIBLE_BASE_URL.

        Raises:
            ConfigError: If PLAUSIBLE_API_KEY is not set
        """
        api_key = os.getenv("PLAUSIBLE_API_KEY", "").strip()
        if not api_key:
            raise ConfigError("PLAUSIBLE_API_KEY is not set")

        base_url = os.getenv("PLAUSIBLE_BASE_URL", "").strip() or None
        return cls(api_key=api_key, base_url=base_url)
