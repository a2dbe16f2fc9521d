"""
pipeshell Configuration Loader

Configuration management for the shell:
- JSON configuration file loading
- Configuration validation
- Default value handling
- Runtime configuration updates

Author: YSNRFD
Version: 1.0.0
"""

import json
import os
import threading
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

from pipeshell.exceptions import ConfigError, ConfigValidationError
from pipeshell.logger import LogLevel


CONFIG_ENV_VAR = "PIPESHELL_CONFIG"
DEFAULT_CONFIG_PATH = "~/.config/pipeshell/config.json"


@dataclass
class ShellConfig:
    """Shell behaviour settings."""
    prompt: str = "$ "
    history_size: int = 1000
    strict_pipelines: bool = False
    strict_redirections: bool = False
    pipe_builtin_output: bool = True


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str = "WARNING"
    log_file: str = ""
    use_colors: bool = True


@dataclass
class Config:
    """
    Main configuration container.

    Example JSON file::

        {
            "shell": {"prompt": "> ", "strict_pipelines": true},
            "logging": {"level": "DEBUG", "log_file": "/tmp/pipeshell.log"}
        }
    """
    shell: ShellConfig = field(default_factory=ShellConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigLoader:
    """
    Configuration loader and manager.

    Handles loading configuration from JSON files, validating
    settings, and providing runtime configuration access.

    Example:
        >>> loader = ConfigLoader()
        >>> config = loader.load('config.json')
        >>> print(config.shell.prompt)
        $
    """

    _instance: Optional['ConfigLoader'] = None
    _lock = threading.Lock()

    def __new__(cls) -> 'ConfigLoader':
        """Singleton pattern for configuration access."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._config = Config()
                cls._instance._loaded = False
                cls._instance._path = None
            return cls._instance

    def load(self, config_path: str) -> Config:
        """
        Load configuration from a JSON file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Config object with loaded settings

        Raises:
            ConfigError: If the file cannot be loaded or parsed
            ConfigValidationError: If a value has the wrong type
        """
        path = Path(config_path).expanduser()

        if not path.exists():
            raise ConfigError(
                f"Configuration file not found: {config_path}",
                path=str(path)
            )

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(
                f"Invalid JSON in configuration file: {e}",
                path=str(path)
            )
        except OSError as e:
            raise ConfigError(
                f"Cannot read configuration file: {e}",
                path=str(path)
            )

        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration root must be an object")

        self._config = self._parse_config(data)
        self._loaded = True
        self._path = str(path)
        return self._config

    def load_default(self) -> Config:
        """
        Load the configuration named by ``PIPESHELL_CONFIG``.

        Falls back to ``~/.config/pipeshell/config.json`` when that exists
        and to built-in defaults otherwise.
        """
        explicit = os.environ.get(CONFIG_ENV_VAR)
        if explicit:
            return self.load(explicit)

        default = Path(DEFAULT_CONFIG_PATH).expanduser()
        if default.is_file():
            return self.load(str(default))

        self._config = Config()
        self._loaded = True
        self._path = None
        return self._config

    def _parse_config(self, data: dict[str, Any]) -> Config:
        """Parse configuration data into Config object."""
        config = Config()

        if 'shell' in data:
            shell_data = self._section(data, 'shell')
            config.shell = ShellConfig(
                prompt=shell_data.get('prompt', config.shell.prompt),
                history_size=shell_data.get('history_size', config.shell.history_size),
                strict_pipelines=shell_data.get('strict_pipelines', config.shell.strict_pipelines),
                strict_redirections=shell_data.get('strict_redirections', config.shell.strict_redirections),
                pipe_builtin_output=shell_data.get('pipe_builtin_output', config.shell.pipe_builtin_output),
            )

        if 'logging' in data:
            log_data = self._section(data, 'logging')
            config.logging = LoggingConfig(
                level=log_data.get('level', config.logging.level),
                log_file=log_data.get('log_file', config.logging.log_file),
                use_colors=log_data.get('use_colors', config.logging.use_colors),
            )

        self._validate(config)
        return config

    @staticmethod
    def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
        section = data[name]
        if not isinstance(section, dict):
            raise ConfigValidationError(f"Section '{name}' must be an object", key=name)
        return section

    @staticmethod
    def _validate(config: Config) -> None:
        """Check value types and ranges."""
        for section_name in ('shell', 'logging'):
            section = getattr(config, section_name)
            defaults = type(section)()
            for f in fields(section):
                value = getattr(section, f.name)
                expected = type(getattr(defaults, f.name))
                # bool is an int subclass, keep them apart
                if type(value) is not expected:
                    raise ConfigValidationError(
                        f"Expected {expected.__name__} for {section_name}.{f.name}, "
                        f"got {type(value).__name__}",
                        key=f"{section_name}.{f.name}"
                    )

        if config.shell.history_size < 1:
            raise ConfigValidationError(
                "shell.history_size must be at least 1",
                key="shell.history_size"
            )

        try:
            LogLevel.from_name(config.logging.level)
        except ValueError as e:
            raise ConfigValidationError(str(e), key="logging.level")

    @property
    def config(self) -> Config:
        """Get the current configuration."""
        if not self._loaded:
            return Config()
        return self._config

    @property
    def path(self) -> Optional[str]:
        """Path of the file the configuration came from, if any."""
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value by dot-notation key.

        Args:
            key: Dot-notation key (e.g., 'shell.prompt')
            default: Default value if key not found
        """
        obj: Any = self.config

        for part in key.split('.'):
            if hasattr(obj, part):
                obj = getattr(obj, part)
            else:
                return default

        return obj


def get_config() -> Config:
    """
    Get the global configuration instance.

    Returns:
        Config object with current settings
    """
    return ConfigLoader().config
