"""
Configuration management for vectordex.

Provides dataclasses for configuration and utilities
for loading settings from YAML files.
"""

import os
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, Optional, Literal
import yaml


@dataclass
class HNSWConfig:
    """HNSW index construction and search parameters."""
    M: int = 16
    M_max0: int = 32
    ef_construction: int = 200
    ef_search: int = 50
    seed: int = 42


@dataclass
class StorageConfig:
    """Snapshot storage configuration."""
    snapshot_path: Optional[str] = None
    load_on_startup: bool = True
    save_on_shutdown: bool = True


@dataclass
class Settings:
    """
    Main settings container for vectordex.

    Attributes:
        index_type: Index type for new collections (hnsw, flat)
        hnsw_config: HNSW index settings
        storage_config: Snapshot settings
    """
    index_type: Literal["hnsw", "flat"] = "hnsw"

    hnsw_config: HNSWConfig = field(default_factory=HNSWConfig)
    storage_config: StorageConfig = field(default_factory=StorageConfig)

    def __post_init__(self):
        if self.index_type not in ("hnsw", "flat"):
            raise ValueError(
                f"Unknown index_type: {self.index_type}. Available: hnsw, flat"
            )

    def index_params(self) -> Dict[str, Any]:
        """Construction parameters for the configured index type."""
        if self.index_type == "hnsw":
            return asdict(self.hnsw_config)
        return {}

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        """Create Settings from dictionary."""
        data = dict(data)
        hnsw_data = data.pop("hnsw_config", None) or {}
        storage_data = data.pop("storage_config", None) or {}

        return cls(
            hnsw_config=HNSWConfig(**hnsw_data),
            storage_config=StorageConfig(**storage_data),
            **data
        )

    def to_dict(self) -> dict:
        """Convert Settings to dictionary."""
        return asdict(self)


def get_default_config_path() -> Path:
    """Get path to default configuration file."""
    # Environment variable wins
    env_config = os.environ.get("VECTORDEX_CONFIG")
    if env_config:
        return Path(env_config)

    # Check for config in current directory
    local_config = Path("./config/default_config.yaml")
    if local_config.exists():
        return local_config

    return Path(__file__).parent / "default_config.yaml"


def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses default.

    Returns:
        Settings object with loaded configuration

    Example:
        >>> settings = load_config()
        >>> settings = load_config("./my_config.yaml")
    """
    if config_path is None:
        path = get_default_config_path()
    else:
        path = Path(config_path)

    if not path.exists():
        # Return default settings if no config file
        return Settings()

    with open(path, "r") as f:
        data = yaml.safe_load(f)

    if data is None:
        return Settings()

    return Settings.from_dict(data)
