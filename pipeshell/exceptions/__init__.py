"""
pipeshell Exception Hierarchy

All custom exceptions inherit from ShellException.

Architecture:
    ShellException (Base)
    ├── ShellSyntaxError (also a SyntaxError)
    │   ├── UnterminatedQuoteError
    │   ├── PipelineSyntaxError
    │   └── RedirectionSyntaxError
    ├── ExecutionError
    │   ├── CommandNotFoundError
    │   ├── SpawnError
    │   └── RedirectionError
    └── ConfigError
        └── ConfigValidationError
"""

from .shell_exceptions import (
    ShellException,
    ShellSyntaxError,
    UnterminatedQuoteError,
    PipelineSyntaxError,
    RedirectionSyntaxError,
    ExecutionError,
    CommandNotFoundError,
    SpawnError,
    RedirectionError,
    ConfigError,
    ConfigValidationError,
)

__all__ = [
    # Base
    "ShellException",
    # Syntax errors
    "ShellSyntaxError",
    "UnterminatedQuoteError",
    "PipelineSyntaxError",
    "RedirectionSyntaxError",
    # Execution errors
    "ExecutionError",
    "CommandNotFoundError",
    "SpawnError",
    "RedirectionError",
    # Configuration errors
    "ConfigError",
    "ConfigValidationError",
]
