"""Harness configuration: environment settings and the YAML catalog."""

from .config_loader import ConfigLoader
from .env_config import ENV_VARS, Config, ConfigError, EnvVar, HarnessConfig, validate_config

__all__ = [
    "Config",
    "ConfigError",
    "ConfigLoader",
    "ENV_VARS",
    "EnvVar",
    "HarnessConfig",
    "validate_config",
]
