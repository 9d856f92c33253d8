"""Configuration manager with YAML override support."""

import os
import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from . import defaults

logger = logging.getLogger(__name__)


class Config:
    """Default settings deep-merged with an optional tileplot.yml."""

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        self.settings = self.load_defaults()

        if config_file is not None:
            config_file = Path(config_file)
            if not config_file.exists():
                raise FileNotFoundError(f"Config file {config_file} does not exist")
            self._load_yaml_config(config_file)
            logger.info(f"Loaded configuration from {config_file}")
        elif not self._is_test_mode():
            config_file = self._find_config_file()
            if config_file is not None:
                self._load_yaml_config(config_file)
                logger.info(f"Loaded configuration from {config_file}")
            else:
                logger.debug("No tileplot.yml found - using defaults only")
        else:
            logger.debug("Test mode detected - ignoring tileplot.yml")

        self.config_file = config_file

    def _find_config_file(self) -> Optional[Path]:
        """Find tileplot.yml with multiple fallback locations."""
        project_root = Path(__file__).parent.parent.parent

        potential_locations = [
            Path.cwd() / 'tileplot.yml',
            project_root / 'tileplot.yml',
            Path.home() / '.tileplot' / 'config.yml',
        ]

        for location in potential_locations:
            if location.exists() and location.is_file():
                return location

        return None

    def _is_test_mode(self) -> bool:
        """Detect if we're running under pytest or with FORCE_TEST_MODE set."""
        return (
            os.environ.get('FORCE_TEST_MODE', 'false').lower() == 'true' or
            os.environ.get('PYTEST_CURRENT_TEST') is not None
        )

    def load_defaults(self) -> Dict[str, Any]:
        """Load default configuration settings."""
        return {
            'rendering': copy.deepcopy(defaults.RENDERING),
            'partitioning': copy.deepcopy(defaults.PARTITIONING),
            'logging': copy.deepcopy(defaults.LOGGING),
        }

    def _load_yaml_config(self, config_file: Path):
        """Load and merge configuration from a YAML file."""
        with open(config_file, 'r') as file:
            yaml_config = yaml.safe_load(file)
        if yaml_config:
            if not isinstance(yaml_config, dict):
                raise ValueError(f"Config file {config_file} must contain a mapping")
            self._deep_merge(self.settings, yaml_config)

    def _deep_merge(self, base: dict, override: dict):
        """Deep merge override into base dictionary."""
        for key, value in override.items():
            if isinstance(value, dict) and key in base and isinstance(base[key], dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation."""
        keys = key.split(".")
        value = self.settings

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    @property
    def rendering(self) -> Dict[str, Any]:
        return self.settings['rendering']

    @property
    def partitioning(self) -> Dict[str, Any]:
        return self.settings['partitioning']

    @property
    def logging(self) -> Dict[str, Any]:
        return self.settings['logging']


# Global configuration instance
config = Config()
