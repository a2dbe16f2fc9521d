"""
pipeshell Core Module

Configuration shared by every part of the shell.
"""

from .config_loader import (
    Config,
    ConfigLoader,
    ShellConfig,
    LoggingConfig,
    get_config,
)

__all__ = [
    'Config',
    'ConfigLoader',
    'ShellConfig',
    'LoggingConfig',
    'get_config',
]
