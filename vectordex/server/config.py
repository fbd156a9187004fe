"""
Server configuration.
"""

from dataclasses import dataclass, field
from typing import Optional, List
import os


@dataclass
class ServerConfig:
    """Configuration for the vectordex server."""

    # Server settings
    host: str = "0.0.0.0"
    port: int = 8000

    # API settings
    api_prefix: str = "/api/v1"
    docs_enabled: bool = True

    # Database settings
    config_path: Optional[str] = None
    snapshot_path: Optional[str] = None

    # Security
    api_key: Optional[str] = None
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    # Limits
    max_vectors_per_request: int = 10000

    # Logging
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Load configuration from environment variables."""
        return cls(
            host=os.getenv("VECTORDEX_HOST", "0.0.0.0"),
            port=int(os.getenv("VECTORDEX_PORT", "8000")),
            config_path=os.getenv("VECTORDEX_CONFIG"),
            snapshot_path=os.getenv("VECTORDEX_SNAPSHOT"),
            api_key=os.getenv("VECTORDEX_API_KEY"),
            log_level=os.getenv("VECTORDEX_LOG_LEVEL", "INFO"),
            max_vectors_per_request=int(os.getenv("VECTORDEX_MAX_VECTORS", "10000")),
        )
