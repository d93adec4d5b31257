"""Configuration loader for the Rotten Trenches PNL service."""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

HELIUS_API_KEY_ENV = "HELIUS_API_KEY"


class ConfigurationError(RuntimeError):
    """Raised when required configuration is missing."""


@dataclass
class ApiConfig:
    helius_base: str = "https://api.helius.xyz"
    helius_rpc: str = "https://mainnet.helius-rpc.com"
    price_api: str = "https://api.jup.ag/price/v2"
    transaction_limit: int = 100
    timeout_seconds: float = 30.0


@dataclass
class JobConfig:
    # Only count trades from this many hours back; None counts every fetched trade
    lookback_hours: int | None = 24
    # Courtesy pause between KOLs for the Helius rate limit
    entity_delay_seconds: float = 0.2
    fallback_sol_price: float = 150.0
    # Latest-trades feed
    min_feed_sol_amount: float = 0.4
    feed_limit: int = 20


@dataclass
class LoggingConfig:
    level: str = "INFO"
    file: str = "logs/pnl.log"
    max_file_size_mb: int = 10
    backup_count: int = 5


@dataclass
class DatabaseConfig:
    path: str = "data/rotten_trenches.db"


@dataclass
class Config:
    api: ApiConfig = field(default_factory=ApiConfig)
    job: JobConfig = field(default_factory=JobConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    helius_api_key: str | None = None

    def require_helius_api_key(self) -> str:
        """Return the Helius API key or raise ConfigurationError."""
        if not self.helius_api_key:
            raise ConfigurationError(f"{HELIUS_API_KEY_ENV} is not configured")
        return self.helius_api_key


def load_config(config_path: str | Path = "config.yaml") -> Config:
    """Load configuration from a YAML file and the environment."""
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    return Config(
        api=ApiConfig(**raw.get("api", {})),
        job=JobConfig(**raw.get("job", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        database=DatabaseConfig(**raw.get("database", {})),
        helius_api_key=os.environ.get(HELIUS_API_KEY_ENV) or None,
    )


def env_config() -> Config:
    """Default configuration with secrets from the environment, for use without a file."""
    return Config(helius_api_key=os.environ.get(HELIUS_API_KEY_ENV) or None)
