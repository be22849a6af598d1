"""Application configuration helpers."""

from __future__ import annotations

from .env import env_flag
from .errors import ConfigurationError, InvalidConfigurationError
from .evolution import EvolutionConfig, get_evolution_config
from .logging import configure_logging, get_log_level
from .storage import DatabaseConfig, get_database_config

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "EvolutionConfig",
    "InvalidConfigurationError",
    "configure_logging",
    "env_flag",
    "get_database_config",
    "get_evolution_config",
    "get_log_level",
]
