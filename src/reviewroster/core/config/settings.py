"""Configuration management for ReviewRoster."""
from pathlib import Path
from typing import Optional

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ReviewRosterConfig(BaseSettings):
    """Main configuration for the ReviewRoster service.

    Configuration can be loaded from:
    1. Environment variables (prefixed with REVIEWROSTER_)
    2. YAML configuration file (reviewroster.yaml)
    3. Default values
    """

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host address")
    api_port: int = Field(default=8080, description="API port")

    # Database Configuration
    storage: str = Field(default="sqlite", description="Storage backend (sqlite or postgresql)")
    db_path: str = Field(default="./reviewroster.db", description="Database file path for SQLite")
    db_url: Optional[str] = Field(default=None, description="Database URL for PostgreSQL")
    db_echo: bool = Field(default=False, description="Echo SQL statements to the log")

    # Assignment Configuration
    reviewers_per_pr: int = Field(
        default=2,
        ge=0,
        description="Number of reviewers assigned when a pull request is created"
    )
    random_seed: Optional[int] = Field(
        default=None,
        description="Seed for reviewer selection (unset uses system randomness)"
    )

    # Store call behaviour
    store_timeout: float = Field(
        default=5.0,
        gt=0.0,
        description="Seconds a single store call may take before it is aborted"
    )
    store_retry_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts for store calls failing with a transient error"
    )
    store_retry_backoff: float = Field(
        default=0.05,
        ge=0.0,
        description="Base delay in seconds between retries (multiplied by attempt number)"
    )

    # Logging Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_file: Optional[str] = Field(default=None, description="Log file path")

    model_config = SettingsConfigDict(
        env_prefix="REVIEWROSTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    def get_database_url(self) -> str:
        """Async SQLAlchemy URL for the configured backend.

        An explicit ``db_url`` always wins. SQLite paths are made absolute so
        the server and the CLI agree on the file regardless of cwd.

        Raises:
            ValueError: PostgreSQL without ``db_url``, or an unknown backend
        """
        if self.db_url:
            return self.db_url

        if self.storage == "postgresql":
            raise ValueError(
                "storage is postgresql but no db_url is set "
                "(use REVIEWROSTER_DB_URL or db_url in the config file)"
            )
        if self.storage != "sqlite":
            raise ValueError(f"Unknown storage backend: {self.storage}")

        if self.db_path == ":memory:":
            return "sqlite+aiosqlite:///:memory:"
        return f"sqlite+aiosqlite:///{Path(self.db_path).expanduser().absolute()}"

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "ReviewRosterConfig":
        """Build a config from a YAML mapping; environment variables still apply.

        Raises:
            FileNotFoundError: No file at ``config_path``
            ValueError: The file does not hold a mapping
        """
        path = Path(config_path)
        if not path.is_file():
            raise FileNotFoundError(f"No configuration file at {path}")

        values = yaml.safe_load(path.read_text(encoding="utf-8"))
        if values is None:
            values = {}
        if not isinstance(values, dict):
            raise ValueError(f"{path} must contain a mapping of settings")
        return cls(**values)

    def to_yaml(self, config_path: str | Path) -> None:
        """Write every set field to ``config_path`` in declaration order."""
        Path(config_path).write_text(
            yaml.safe_dump(self.model_dump(exclude_none=True), sort_keys=False),
            encoding="utf-8",
        )

    @classmethod
    def create_default_config(cls, config_path: str | Path) -> "ReviewRosterConfig":
        """Write the defaults to ``config_path`` and return them."""
        config = cls()
        config.to_yaml(config_path)
        return config


CONFIG_SEARCH_PATHS = (
    Path("reviewroster.yaml"),
    Path("reviewroster.yml"),
    Path(".reviewroster.yaml"),
    Path.home() / ".reviewroster" / "config.yaml",
)

_config: Optional[ReviewRosterConfig] = None


def init_config(config_path: Optional[str | Path] = None) -> ReviewRosterConfig:
    """Load the process-wide configuration.

    Args:
        config_path: YAML file to load. When omitted the first existing file
            in ``CONFIG_SEARCH_PATHS`` is used, falling back to environment
            variables and defaults.
    """
    global _config

    if config_path is None:
        config_path = next((path for path in CONFIG_SEARCH_PATHS if path.is_file()), None)

    _config = ReviewRosterConfig.from_yaml(config_path) if config_path else ReviewRosterConfig()
    return _config


def get_config() -> ReviewRosterConfig:
    """Current configuration, loading it on first use."""
    if _config is None:
        return init_config()
    return _config
