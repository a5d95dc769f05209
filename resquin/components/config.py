"""
Configuration management for resquin.

Settings are resolved in three layers: built-in defaults, then environment
variables, then explicit overrides (from a config file or the command line).
"""

import os
import json
import logging
import threading
from typing import Callable, Dict, List, Optional, Any, Tuple
from copy import deepcopy
import yaml

# Set up logging
logger = logging.getLogger(__name__)


DEFAULTS: Dict[str, Any] = {
    'indicators': {
        'min-valid-responses': 1.0,  # share of valid responses required
        'normalize': True            # style counts as proportions
    },
    'server': {
        'port': 8080,
        'host': 'localhost'
    },
    'logging': {
        'level': 'warning'
    }
}


def to_int(value: Any) -> Optional[int]:
    """
    Convert a value to an integer.

    Args:
        value: Value to convert

    Returns:
        Integer value, or None if conversion failed
    """
    if value is None:
        return None

    try:
        return int(value)
    except (ValueError, TypeError):
        return None


def to_float(value: Any) -> Optional[float]:
    """Convert a value to a float, or None if conversion failed."""
    if value is None:
        return None

    try:
        return float(value)
    except (ValueError, TypeError):
        return None


def to_bool(value: Any) -> Optional[bool]:
    """
    Convert a value to a boolean.

    Accepts booleans, numbers and the usual yes/no spellings.

    Args:
        value: Value to convert

    Returns:
        Boolean value, or None if the value is not recognised
    """
    if isinstance(value, bool):
        return value

    if isinstance(value, (int, float)):
        return bool(value)

    if isinstance(value, str):
        value = value.lower().strip()
        if value in ('true', 'yes', 'y', '1', 't'):
            return True
        if value in ('false', 'no', 'n', '0', 'f'):
            return False

    return None


def to_level(value: Any) -> Optional[str]:
    return str(value).lower() if value else None


# Environment variable, dotted config path, converter
ENV_VARS: List[Tuple[str, str, Callable[[Any], Any]]] = [
    ('RESQUIN_MIN_VALID_RESPONSES', 'indicators.min-valid-responses', to_float),
    ('RESQUIN_NORMALIZE', 'indicators.normalize', to_bool),
    ('PORT', 'server.port', to_int),
    ('HOST', 'server.host', str),
    ('LOG_LEVEL', 'logging.level', to_level),
]


def deep_update(target: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge nested dictionaries in place; values in updates win.

    Args:
        target: Dictionary to update
        updates: Nested values to merge in

    Returns:
        The updated target
    """
    for key, value in updates.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            deep_update(target[key], value)
        else:
            target[key] = value
    return target


def load_config_file(filepath: str) -> Dict[str, Any]:
    """
    Load configuration overrides from a JSON or YAML file.

    Args:
        filepath: Path to configuration file

    Returns:
        Configuration dictionary
    """
    if filepath.endswith('.json'):
        with open(filepath, 'r') as f:
            return json.load(f)
    elif filepath.endswith('.yaml') or filepath.endswith('.yml'):
        with open(filepath, 'r') as f:
            return yaml.safe_load(f) or {}
    else:
        raise ValueError(f"Unsupported configuration file format: {filepath}")


class Config:
    """
    Resolved settings for one run of resquin.
    """

    def __init__(self, overrides: Optional[Dict[str, Any]] = None):
        self._lock = threading.RLock()
        self._config: Dict[str, Any] = {}
        self.load_config(overrides)

    def load_config(self, overrides: Optional[Dict[str, Any]] = None) -> None:
        """
        Rebuild the configuration from defaults, environment and overrides.

        Args:
            overrides: Optional nested configuration overrides
        """
        config = deepcopy(DEFAULTS)

        for name, path, convert in ENV_VARS:
            if name not in os.environ:
                continue
            value = convert(os.environ[name])
            if value is None:
                logger.warning(f"Ignoring invalid value for {name}: {os.environ[name]!r}")
                continue
            deep_update(config, self._nest(path, value))

        if overrides:
            deep_update(config, deepcopy(overrides))

        with self._lock:
            self._config = config

        logger.debug("Configuration loaded")

    @staticmethod
    def _nest(path: str, value: Any) -> Dict[str, Any]:
        """Turn 'a.b' and a value into {'a': {'b': value}}."""
        nested = value
        for component in reversed(path.split('.')):
            nested = {component: nested}
        return nested

    def get(self, path: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            path: Configuration path (dot-separated)
            default: Default value if not found

        Returns:
            Configuration value, or default if not found
        """
        value = self._config
        for component in path.split('.'):
            if isinstance(value, dict) and component in value:
                value = value[component]
            else:
                return default
        return value


class ConfigManager:
    """
    Process-wide configuration used by the HTTP server.
    """

    _instance = None
    _lock = threading.RLock()

    @classmethod
    def get_config(cls, overrides: Optional[Dict[str, Any]] = None) -> Config:
        """
        Get the shared configuration instance.

        Passing overrides (even an empty dict) reloads the configuration from
        scratch, so earlier overrides never carry over.

        Args:
            overrides: Optional configuration overrides

        Returns:
            Config instance
        """
        with cls._lock:
            if cls._instance is None:
                cls._instance = Config(overrides)
            elif overrides is not None:
                cls._instance.load_config(overrides)

            return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the configuration instance so the next call reloads it."""
        with cls._lock:
            cls._instance = None
