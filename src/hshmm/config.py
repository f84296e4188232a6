"""
Configuration management system for hshmm.

Provides default settings and configuration override capabilities.
"""

import copy
import os
import json
import warnings
from typing import Dict, Any, Optional
from pathlib import Path


DEFAULT_CONFIG = {
    'hmm': {
        'n_states': 3,
        'n_dims': 2,
        'horizon': 10,
        'init_policy': 'biased',
        'auto_finalize': False,
        'tolerance': 1e-9
    },
    'emission': {
        'family': 'gaussian',
        'mean_scale': 1.0,
        'min_variance': 1e-3
    },
    'sampling': {
        'random_seed': 42,
        'n_paths': 5
    },
    'logging': {
        'level': 'INFO',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        'file_logging': False,
        'log_file': 'hshmm.log'
    }
}


class ConfigManager:
    """Manages configuration settings with override capabilities."""

    def __init__(self):
        self._config = copy.deepcopy(DEFAULT_CONFIG)
        self._load_environment_overrides()

    def _load_environment_overrides(self):
        """Load configuration overrides from environment variables."""
        # Whole-file override first, single keys on top
        config_file = os.getenv('HSHMM_CONFIG')
        if config_file and Path(config_file).exists():
            self.load_from_file(config_file)

        env_overrides = {
            'HSHMM_N_STATES': ('hmm', 'n_states', int),
            'HSHMM_HORIZON': ('hmm', 'horizon', int),
            'HSHMM_LOG_LEVEL': ('logging', 'level', str),
            'HSHMM_RANDOM_SEED': ('sampling', 'random_seed', int)
        }

        for env_var, (section, key, type_func) in env_overrides.items():
            value = os.getenv(env_var)
            if value is not None:
                try:
                    self._config[section][key] = type_func(value)
                except ValueError:
                    warnings.warn(f"Ignoring invalid value for {env_var}: {value!r}")

    def get(self, section: str, key: Optional[str] = None) -> Any:
        """Get configuration value(s)."""
        if key is None:
            return self._config.get(section, {})
        return self._config.get(section, {}).get(key)

    def set(self, section: str, key: str, value: Any) -> None:
        """Set configuration value."""
        if section not in self._config:
            self._config[section] = {}
        self._config[section][key] = value

    def update(self, config_dict: Dict[str, Any]) -> None:
        """Update configuration with dictionary."""
        for section, values in config_dict.items():
            if section not in self._config:
                self._config[section] = {}
            if isinstance(values, dict):
                self._config[section].update(values)
            else:
                self._config[section] = values

    def load_from_file(self, config_path: str) -> None:
        """Load configuration from JSON file."""
        # File sections merge into existing ones key by key
        try:
            with open(config_path, 'r') as f:
                file_config = json.load(f)
            self.update(file_config)
        except (FileNotFoundError, json.JSONDecodeError) as e:
            raise ValueError(f"Failed to load config from {config_path}: {e}")

    def save_to_file(self, config_path: str) -> None:
        """Save current configuration to JSON file."""
        parent = os.path.dirname(config_path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        with open(config_path, 'w') as f:
            json.dump(self._config, f, indent=2)

    def get_all(self) -> Dict[str, Any]:
        """Get complete configuration dictionary."""
        return copy.deepcopy(self._config)

    def reset_to_defaults(self) -> None:
        """Reset configuration to default values."""
        # Environment still wins over defaults after a reset
        self._config = copy.deepcopy(DEFAULT_CONFIG)
        self._load_environment_overrides()


# Global configuration manager instance
_config_manager = ConfigManager()


def get_config(section: str, key: Optional[str] = None) -> Any:
    """Get configuration value(s) from global config manager."""
    return _config_manager.get(section, key)


def set_config(section: str, key: str, value: Any) -> None:
    """Set configuration value in global config manager."""
    _config_manager.set(section, key, value)


def update_config(config_dict: Dict[str, Any]) -> None:
    """Update global configuration with dictionary."""
    _config_manager.update(config_dict)


def load_config_file(config_path: str) -> None:
    """Load configuration from file into global config manager."""
    _config_manager.load_from_file(config_path)


def save_config_file(config_path: str) -> None:
    """Save global configuration to file."""
    _config_manager.save_to_file(config_path)


def get_all_config() -> Dict[str, Any]:
    """Get complete configuration dictionary."""
    return _config_manager.get_all()


def reset_config() -> None:
    """Reset global configuration to defaults."""
    _config_manager.reset_to_defaults()
