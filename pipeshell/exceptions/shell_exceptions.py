"""
Shell Exceptions

Exceptions raised while turning an input line into a pipeline and
while executing that pipeline. None of these are fatal to the shell
session: the REPL and the executor turn them into diagnostics.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional, Any


class ShellException(Exception):
    """
    Base exception for all shell errors.

    Attributes:
        message: Human-readable error description
        error_code: Numeric error code for programmatic handling
        context: Additional context about the error

    Example:
        >>> raise ShellException("Something went wrong", error_code=1000)
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or 1000
        self.context = context or {}

    def __str__(self) -> str:
        base = f"[Error {self.error_code}] {self.message}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base = f"{base} ({context_str})"
        return base

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code})"
        )


# ---------------------------------------------------------------------------
# Syntax errors
# ---------------------------------------------------------------------------

class ShellSyntaxError(ShellException, SyntaxError):
    """
    The input line cannot be turned into a pipeline.

    Also a ``SyntaxError`` so callers that only know about the builtin
    hierarchy can still catch it.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message, error_code=error_code or 1100, context=context)


class UnterminatedQuoteError(ShellSyntaxError):
    """
    A single or double quote was opened but never closed.

    Example:
        >>> raise UnterminatedQuoteError("'", position=5)
    """

    def __init__(self, quote: str, position: int) -> None:
        super().__init__(
            f"unexpected end of line while looking for matching `{quote}'",
            error_code=1101,
            context={"position": position}
        )
        self.quote = quote
        self.position = position


class PipelineSyntaxError(ShellSyntaxError):
    """An empty pipeline stage was found while strict pipelines are on."""

    def __init__(self, message: str = "syntax error near unexpected token `|'") -> None:
        super().__init__(message, error_code=1102)


class RedirectionSyntaxError(ShellSyntaxError):
    """A redirection operator had no target while strict redirections are on."""

    def __init__(self, operator: str) -> None:
        super().__init__(
            "syntax error near unexpected token `newline'",
            error_code=1103,
            context={"operator": operator}
        )
        self.operator = operator


# ---------------------------------------------------------------------------
# Execution errors
# ---------------------------------------------------------------------------

class ExecutionError(ShellException):
    """
    Base class for failures while running a pipeline.

    Attributes:
        status: Exit status the shell reports for the failed pipeline
    """

    status = 1

    def __init__(
        self,
        message: str,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message, error_code=error_code or 1200, context=context)


class CommandNotFoundError(ExecutionError):
    """
    The resolver could not map a command name to a program.

    Example:
        >>> raise CommandNotFoundError("frobnicate")
    """

    status = 127

    def __init__(self, command: str) -> None:
        super().__init__(f"{command}: command not found", error_code=1201)
        self.command = command


class SpawnError(ExecutionError):
    """The OS refused to start a resolved program."""

    status = 126

    def __init__(self, command: str, reason: str, path: Optional[str] = None) -> None:
        super().__init__(
            f"{command}: {reason}",
            error_code=1202,
            context={"path": path} if path else None
        )
        self.command = command
        self.reason = reason
        self.path = path


class RedirectionError(ExecutionError):
    """
    The redirection target could not be opened or created.

    Raised before any stage of the pipeline starts.
    """

    status = 1

    def __init__(self, target: str, reason: str) -> None:
        super().__init__(f"{target}: {reason}", error_code=1203)
        self.target = target
        self.reason = reason


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------

class ConfigError(ShellException):
    """The configuration file is missing or unreadable."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        error_code: Optional[int] = None
    ) -> None:
        super().__init__(
            message,
            error_code=error_code or 1300,
            context={"path": path} if path else None
        )
        self.path = path


class ConfigValidationError(ConfigError):
    """A configuration value has the wrong type or is out of range."""

    def __init__(self, message: str, key: Optional[str] = None) -> None:
        super().__init__(message, error_code=1301)
        self.key = key
        if key:
            self.context["key"] = key
