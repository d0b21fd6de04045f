"""
Configuration Loader

Loads the expected entity catalog from YAML, merging an optional override
file over the packaged defaults.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

PACKAGED_CONFIG_DIR = Path(__file__).parent


class ConfigLoader:
    """Load and merge configuration from YAML files."""

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = Path(config_dir) if config_dir else PACKAGED_CONFIG_DIR
        self._cache = {}

    def load(self, config_name: str, override_path: Optional[Path] = None) -> Dict[str, Any]:
        """
        Load configuration from YAML with an optional override.

        Loading order:
        1. {config_dir}/{config_name}.yaml
        2. override_path (overrides, deep-merged)

        Args:
            config_name: Name of config file (without .yaml extension)
            override_path: Optional YAML file merged over the base

        Returns:
            Merged configuration dictionary
        """
        cache_key = (config_name, str(override_path) if override_path else None)
        if cache_key in self._cache:
            return self._cache[cache_key]

        base_path = self.config_dir / f"{config_name}.yaml"
        if not base_path.exists():
            raise FileNotFoundError(f"Base config not found: {base_path}")

        config = self._read(base_path)

        if override_path is not None:
            override_path = Path(override_path)
            if not override_path.exists():
                raise FileNotFoundError(f"Override config not found: {override_path}")
            logger.info(f"Applying {config_name} overrides from {override_path}")
            config = self._merge_config(config, self._read(override_path))

        self._cache[cache_key] = config
        return config

    @staticmethod
    def _read(path: Path) -> Dict[str, Any]:
        with open(path) as f:
            return yaml.safe_load(f) or {}

    def _merge_config(self, base: Dict, override: Dict) -> Dict:
        """Deep merge override config into base config."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value
        return result
