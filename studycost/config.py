"""Configuration and logging for the study-abroad cost estimator."""

import logging
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration class using Pydantic BaseSettings.

    Supports loading from environment variables and .env files.
    Simulation size and percentile levels are fixed in
    ``studycost.sim.cost_estimator`` and are not settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Tips service (optional)
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_API_BASE: str = "https://api.openai.com/v1"
    TIPS_MODEL: str = "gpt-4o-mini"
    TIPS_TEMPERATURE: float = 0.7
    TIPS_TIMEOUT_SECONDS: float = 30.0

    # HTTP server
    HOST: str = "0.0.0.0"
    PORT: int = 5000

    # Reporting
    CURRENCY: str = "USD"
    RESULTS_DIR: str = "results"

    # Random seed (None = fresh entropy per estimate)
    RANDOM_STATE: Optional[int] = None

    @property
    def results_dir(self) -> Path:
        """Get results directory as Path object."""
        return Path(self.RESULTS_DIR)

    @property
    def tips_enabled(self) -> bool:
        """True when an API key for the tips service is configured."""
        return bool(self.OPENAI_API_KEY)


# Global configuration instance
cfg = Settings()


# Logging configuration
_logging_configured = False


def get_logger(name: str = "studycost") -> logging.Logger:
    """Get or create a logger with consistent configuration.

    Configures logging.basicConfig once (INFO level) on first call.
    Subsequent calls return loggers with the same configuration.

    Args:
        name: Logger name (typically module name)

    Returns:
        Configured logger instance
    """
    global _logging_configured

    if not _logging_configured:
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        _logging_configured = True

    return logging.getLogger(name)


# Global logger instance
logger = get_logger("studycost")
