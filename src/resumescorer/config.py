"""Unified configuration management for resumescorer using Pydantic v2."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from resumescorer.constants import DEFAULT_MODEL, MAX_FILE_SIZE

logger = logging.getLogger(__name__)

# Default directories
DEFAULT_CONFIG_DIR = Path("~/.config/resumescorer").expanduser()
DEFAULT_DATA_DIR = Path("~/.local/share/resumescorer").expanduser()

DEFAULT_CONFIG_PATHS = [
    Path("config.yaml"),
    DEFAULT_CONFIG_DIR / "config.yaml",
]


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field("INFO", description="Logging level")
    file: Optional[Path] = Field(None, description="Path to log file")
    format: str = Field(
        "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s:%(lineno)d - %(message)s",
        description="Log message format for file output",
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        v = v.upper()
        if v not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(
                "level must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL"
            )
        return v

    @field_validator("file", mode="before")
    @classmethod
    def resolve_log_file(cls, v: Optional[Union[str, Path]]) -> Optional[Path]:
        if v is None:
            return None
        return Path(v).expanduser().resolve()


class OpenAIConfig(BaseModel):
    """Configuration for the OpenAI chat completion call."""

    model: str = Field(DEFAULT_MODEL, description="Default model id")
    base_url: Optional[str] = Field(
        None,
        description="Base URL for the OpenAI API. Useful for proxy or self-hosted instances",
    )
    timeout: float = Field(60.0, gt=0, le=600, description="HTTP timeout in seconds")
    temperature: float = Field(0.5, ge=0.0, le=2.0, description="Sampling temperature")
    max_tokens: int = Field(2000, ge=1, description="Maximum tokens to generate")


class RateLimitConfig(BaseModel):
    """Admission policy for a rate limiter."""

    max_concurrent: Optional[int] = Field(
        5, gt=0, description="Maximum tasks in flight; None means unbounded"
    )
    min_time_ms: int = Field(
        200, ge=0, description="Minimum spacing between task starts in milliseconds"
    )


class RetryConfig(BaseModel):
    """Exponential backoff policy for a retry controller."""

    max_retries: int = Field(3, ge=0, description="Retries after the first attempt")
    backoff_factor: float = Field(2.0, gt=1.0, description="Exponential backoff base")
    min_timeout_ms: int = Field(1000, gt=0, description="Delay before the first retry")
    max_timeout_ms: int = Field(5000, gt=0, description="Upper bound on any delay")

    @model_validator(mode="after")
    def check_timeouts(self) -> "RetryConfig":
        if self.max_timeout_ms < self.min_timeout_ms:
            raise ValueError("max_timeout_ms must be >= min_timeout_ms")
        return self


class AnalysisConfig(BaseModel):
    """Settings for the resume analysis request."""

    rate_limit: RateLimitConfig = Field(
        default_factory=lambda: RateLimitConfig(max_concurrent=5, min_time_ms=200)
    )
    retry: RetryConfig = Field(default_factory=RetryConfig)
    attempt_timeout: Optional[float] = Field(
        None,
        gt=0,
        description="Deadline in seconds for a single provider call; None disables it",
    )
    include_raw_payload: bool = Field(
        False,
        description="Show a truncated raw payload in malformed-response messages",
    )


class ProcessingConfig(BaseModel):
    """Settings for end-to-end resume processing."""

    rate_limit: RateLimitConfig = Field(
        default_factory=lambda: RateLimitConfig(max_concurrent=2, min_time_ms=1000)
    )
    max_file_size: int = Field(
        MAX_FILE_SIZE, gt=0, description="Maximum resume size in bytes"
    )
    batch_concurrency: int = Field(
        2, gt=0, description="Resumes processed at once by batch processing"
    )


class AppConfig(BaseSettings):
    """Main application configuration.

    Loads configuration from the following sources in order:
    1. Default values defined in this class
    2. Environment variables (with RESUMESCORER_ prefix)
    3. YAML configuration file, when loaded through ``from_yaml``
    """

    model_config = SettingsConfigDict(
        env_prefix="RESUMESCORER_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    debug: bool = Field(False, description="Enable debug mode")
    data_dir: Path = Field(
        DEFAULT_DATA_DIR, description="Directory for stored settings"
    )

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    processing: ProcessingConfig = Field(default_factory=ProcessingConfig)

    @field_validator("data_dir", mode="before")
    @classmethod
    def resolve_data_dir(cls, v: Union[str, Path]) -> Path:
        return Path(v).expanduser().resolve()

    @property
    def settings_file(self) -> Path:
        """JSON file holding the stored API key and model selection."""
        return self.data_dir / "settings.json"

    @classmethod
    def from_yaml(cls, file_path: Union[str, Path]) -> "AppConfig":
        """Load configuration from a YAML file.

        Values from the file are passed as init arguments. They win over
        environment variables, which still fill in keys the file leaves out.

        Args:
            file_path: Path to the YAML configuration file.

        Returns:
            An instance of AppConfig with settings from the file.
        """
        file_path = Path(file_path).expanduser().resolve()
        with open(file_path, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f) or {}

        if not isinstance(config_data, dict):
            raise ValueError(f"Configuration file must contain a mapping: {file_path}")

        logger.debug(f"Loaded configuration keys from {file_path}: {list(config_data)}")
        return cls(**config_data)

    def to_yaml(self, file_path: Union[str, Path]) -> None:
        """Save configuration to a YAML file.

        Args:
            file_path: Path to save the YAML configuration to.
        """
        file_path = Path(file_path).expanduser().resolve()
        file_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict: Dict[str, Any] = self.model_dump(mode="json")
        with open(file_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(config_dict, f, default_flow_style=False, sort_keys=False)


def load_config(config_path: Optional[Union[str, Path]] = None) -> AppConfig:
    """Load application configuration.

    Args:
        config_path: Optional path to a YAML config file. When omitted the
            default locations are searched and the first existing file wins.

    Returns:
        Loaded AppConfig instance.

    Raises:
        FileNotFoundError: If ``config_path`` is given but does not exist.
    """
    if config_path:
        config_path = Path(config_path).expanduser().resolve()
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        logger.info(f"Using configuration file: {config_path}")
        return AppConfig.from_yaml(config_path)

    for path in DEFAULT_CONFIG_PATHS:
        if path.exists():
            logger.info(f"Found configuration file at: {path}")
            return AppConfig.from_yaml(path)

    logger.debug("No configuration file found, using defaults")
    return AppConfig()
