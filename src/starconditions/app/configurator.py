"""
Configuration Management for starconditions

Environment-aware settings for logging and engine construction, plus the
helpers that apply them.
"""

import logging
import logging.handlers
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from .engine import ConditionsEngine

logger = logging.getLogger(__name__)

LOGGER_NAME = "starconditions"


class Environment(Enum):
    """Application environments"""
    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


@dataclass
class LoggingConfig:
    """Logging configuration"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


@dataclass
class EngineSettings:
    """Engine construction settings"""
    reactive: bool = True


@dataclass
class ApplicationConfig:
    """Complete configuration"""
    environment: Environment = Environment.DEVELOPMENT
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    engine: EngineSettings = field(default_factory=EngineSettings)

    @classmethod
    def for_environment(cls, environment: Environment) -> 'ApplicationConfig':
        """Create configuration for specific environment"""
        config = cls(environment=environment)

        if environment == Environment.DEVELOPMENT:
            config.logging.level = "DEBUG"
        elif environment == Environment.TESTING:
            config.logging.level = "WARNING"
        elif environment == Environment.PRODUCTION:
            config.logging.level = "WARNING"

        return config

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'ApplicationConfig':
        """Create configuration from dictionary"""
        environment = Environment(config_dict.get("environment", Environment.DEVELOPMENT.value))
        config = cls.for_environment(environment)

        for section in ("logging", "engine"):
            target = getattr(config, section)
            for key, value in config_dict.get(section, {}).items():
                if hasattr(target, key):
                    setattr(target, key, value)

        return config

    @classmethod
    def from_environment(cls) -> 'ApplicationConfig':
        """Create configuration from environment variables"""
        env_name = os.getenv('STARCONDITIONS_ENV', 'development')
        config = cls.for_environment(Environment(env_name))

        if os.getenv('STARCONDITIONS_LOG_LEVEL'):
            config.logging.level = os.getenv('STARCONDITIONS_LOG_LEVEL').upper()

        if os.getenv('STARCONDITIONS_LOG_FILE'):
            config.logging.file_path = os.getenv('STARCONDITIONS_LOG_FILE')

        if os.getenv('STARCONDITIONS_REACTIVE'):
            config.engine.reactive = os.getenv('STARCONDITIONS_REACTIVE').lower() == 'true'

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary"""
        return {
            "environment": self.environment.value,
            "logging": {
                "level": self.logging.level,
                "format": self.logging.format,
                "file_path": self.logging.file_path,
                "max_file_size": self.logging.max_file_size,
                "backup_count": self.logging.backup_count
            },
            "engine": {
                "reactive": self.engine.reactive
            }
        }


# Global configuration management
_current_config: Optional[ApplicationConfig] = None

def set_config(config: Optional[ApplicationConfig]):
    """Set the global configuration"""
    global _current_config
    _current_config = config

def get_config() -> ApplicationConfig:
    """Get the current global configuration"""
    global _current_config

    if _current_config is None:
        _current_config = ApplicationConfig.from_environment()

    return _current_config


def configure_logging(config: Optional[LoggingConfig] = None) -> logging.Logger:
    """
    Attach a handler to the package logger according to `config`.

    Re-configuring replaces the handler installed by a previous call.
    """
    config = config or get_config().logging
    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(config.level.upper())

    for handler in list(package_logger.handlers):
        if getattr(handler, "_starconditions", False):
            package_logger.removeHandler(handler)
            handler.close()

    if config.file_path:
        handler = logging.handlers.RotatingFileHandler(
            config.file_path, maxBytes=config.max_file_size, backupCount=config.backup_count
        )
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(config.format))
    handler._starconditions = True
    package_logger.addHandler(handler)
    return package_logger


def create_engine(config: Optional[ApplicationConfig] = None, system=None, **kwargs) -> ConditionsEngine:
    """
    Build a `ConditionsEngine` from configuration.

    Args:
        config: defaults to the global configuration
        system: `ReactiveSystem` to wire in; the global one by default
        **kwargs: forwarded to `ConditionsEngine` (document, caches, ...)
    """
    config = config or get_config()
    if config.engine.reactive:
        engine = ConditionsEngine.with_reactivity(system, **kwargs)
    else:
        engine = ConditionsEngine(**kwargs)
    logger.debug(f"Created {engine!r} for {config.environment.value}")
    return engine
