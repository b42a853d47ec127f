import copy
import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional, Tuple

from logger import get_logger
from exceptions import ConfigurationError
from parameters import validate_delimiters
from constants import (
    CONFIG_DIR, CONFIG_FILE, TROVE_FILE, ENV_CONFIG_PATH, DEFAULT_NAMESPACE, DEFAULT_QUERY_PREFIX,
    DEFAULT_COLORS, DEFAULT_PARAMETER_TOKEN, DEFAULT_PARAMETER_ENDING_TOKEN, DEFAULT_EXECUTION_MODE,
    APP_VERSION
)


def get_config_path() -> str:
    """Resolve the config file from $HOARD_CONFIG or fall back to ~/.config/hoard/config.yml.

    A HOARD_CONFIG value with a file suffix names the config file itself,
    anything else is treated as the directory holding it.
    """
    env_path = os.path.expandvars(os.path.expanduser(os.environ.get(ENV_CONFIG_PATH, '')))
    if env_path:
        path = Path(env_path)
        if path.suffix:
            return str(path)
        return str(path / CONFIG_FILE)
    return str(Path.home() / CONFIG_DIR / CONFIG_FILE)


class Config:
    """Configuration management for hoard"""

    DEFAULT_CONFIG = {
        'version': APP_VERSION,
        'general': {
            'default_namespace': DEFAULT_NAMESPACE,
            'query_prefix': DEFAULT_QUERY_PREFIX,
            'trove_path': None,
            'read_from_current_directory': True
        },
        'colors': {name: list(rgb) for name, rgb in DEFAULT_COLORS.items()},
        'parameters': {
            'token': DEFAULT_PARAMETER_TOKEN,
            'ending_token': DEFAULT_PARAMETER_ENDING_TOKEN
        },
        'gpt': {
            'api_key': ''
        },
        'execution': {
            'mode': DEFAULT_EXECUTION_MODE
        }
    }

    def __init__(self, config_file: Optional[str] = None):
        self.logger = get_logger(self.__class__.__name__)
        self.config_file = config_file or get_config_path()
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)
        self._load_config()
        self._validate_parameter_tokens()

    def _load_config(self):
        """Load configuration from file"""
        if not os.path.exists(self.config_file):
            self.logger.debug(f"Config file {self.config_file} does not exist, using defaults")
            return

        try:
            self.logger.debug(f"Loading config from {self.config_file}")
            with open(self.config_file, 'r') as f:
                file_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            self.logger.error(f"Invalid YAML in config file {self.config_file}: {e}")
            raise ConfigurationError(f"Invalid YAML in config file: {e}")
        except OSError as e:
            self.logger.warning(f"Could not load config file {self.config_file}: {e}")
            return

        if not isinstance(file_config, dict):
            raise ConfigurationError(f"Config file {self.config_file} must contain a mapping")

        self._merge_config(self.config, file_config)
        self.logger.info(f"Configuration loaded successfully from {self.config_file}")

        # Older config files lack newer options, write the defaults back
        if self._missing_keys(self.DEFAULT_CONFIG, file_config):
            self.logger.info("Adding missing default values to config file")
            general = file_config.get('general', {})
            if isinstance(general, dict) and 'read_from_current_directory' not in general:
                # Existing setups keep reading the trove beside the config file
                self.config['general']['read_from_current_directory'] = False
            self.save()

    def _merge_config(self, base: Dict, override: Dict):
        """Recursively merge configuration dictionaries"""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._merge_config(base[key], value)
            else:
                base[key] = value

    def _missing_keys(self, defaults: Dict, loaded: Dict) -> bool:
        """Check whether the loaded config lacks any default key"""
        for key, value in defaults.items():
            if key not in loaded:
                return True
            if isinstance(value, dict) and isinstance(loaded[key], dict):
                if self._missing_keys(value, loaded[key]):
                    return True
        return False

    def update_from_cli(self, **kwargs):
        """Update configuration from CLI arguments"""
        for key, value in kwargs.items():
            if value is not None:
                if '.' in key:
                    # Handle nested keys like 'general.default_namespace'
                    keys = key.split('.')
                    current = self.config
                    for k in keys[:-1]:
                        if k not in current:
                            current[k] = {}
                        current = current[k]
                        if not isinstance(current, dict):
                            raise ConfigurationError(f"Cannot set '{key}': '{k}' is not a section")
                    current[keys[-1]] = value
                else:
                    self.config[key] = value
        self._validate_parameter_tokens()

    def _validate_parameter_tokens(self):
        for key in ('parameters.token', 'parameters.ending_token'):
            value = self.get(key)
            if value is not None and not isinstance(value, str):
                raise ConfigurationError(f"{key} must be a string, got {value!r}")
        validate_delimiters(self.parameter_token, self.parameter_ending_token)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation"""
        keys = key.split('.')
        current = self.config
        for k in keys:
            if isinstance(current, dict) and k in current:
                current = current[k]
            else:
                return default
        return current

    @property
    def parameter_token(self) -> Optional[str]:
        return self.get('parameters.token') or None

    @property
    def parameter_ending_token(self) -> Optional[str]:
        return self.get('parameters.ending_token') or None

    @property
    def default_namespace(self) -> str:
        return self.get('general.default_namespace') or DEFAULT_NAMESPACE

    @property
    def query_prefix(self) -> str:
        prefix = self.get('general.query_prefix')
        return DEFAULT_QUERY_PREFIX if prefix is None else str(prefix)

    @property
    def trove_path(self) -> str:
        """Path of the trove file holding the hoarded commands.

        A trove.yml in the working directory wins when
        general.read_from_current_directory is enabled.
        """
        local_trove = Path(TROVE_FILE)
        if self.get('general.read_from_current_directory') and local_trove.exists():
            return str(local_trove)

        configured = self.get('general.trove_path')
        if configured:
            return os.path.expandvars(os.path.expanduser(str(configured)))
        return str(Path(self.config_file).parent / TROVE_FILE)

    def color(self, name: str) -> Tuple[int, int, int]:
        """Get a configured color as an (r, g, b) tuple"""
        value = self.get(f'colors.{name}')
        try:
            r, g, b = (int(channel) for channel in value)
        except (TypeError, ValueError):
            self.logger.warning(f"Invalid color for '{name}': {value!r}, using default")
            return DEFAULT_COLORS.get(name, DEFAULT_COLORS['primary'])
        return r, g, b

    def save(self):
        """Save current configuration to file"""
        try:
            os.makedirs(os.path.dirname(os.path.abspath(self.config_file)), exist_ok=True)
            with open(self.config_file, 'w') as f:
                yaml.safe_dump(self.config, f, default_flow_style=False, indent=2)
            self.logger.info(f"Configuration saved to {self.config_file}")
        except OSError as e:
            self.logger.error(f"Could not save config file {self.config_file}: {e}")
            raise ConfigurationError(f"Could not save config file: {e}")

    def create_default_config(self):
        """Create default configuration file"""
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)
        self.save()
        return self.config_file

