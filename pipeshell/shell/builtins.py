"""
Shell Built-in Commands

Implements the commands the shell runs in its own process.

Author: YSNRFD
Version: 1.0.0
"""

import os
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Callable, List

from .history import CommandHistory
from .resolver import ExecutableResolver
from pipeshell.logger import get_logger


class Builtin(Enum):
    """The closed set of builtin commands."""
    ECHO = "echo"
    EXIT = "exit"
    TYPE = "type"
    PWD = "pwd"
    CD = "cd"
    HISTORY = "history"

    @classmethod
    def lookup(cls, name: str) -> Optional['Builtin']:
        """Return the builtin called ``name``, or None."""
        try:
            return cls(name)
        except ValueError:
            return None


@dataclass
class BuiltinResult:
    """Text produced by a builtin and its exit status."""
    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0


class BuiltinCommands:
    """
    Built-in shell commands.

    These commands are executed directly by the shell without creating
    a new process. They only produce text; writing it anywhere is up to
    the caller.
    """

    def __init__(
        self,
        resolver: Optional[ExecutableResolver] = None,
        history: Optional[CommandHistory] = None
    ):
        """
        Args:
            resolver: Used by ``type`` to report external commands
            history: Backs the ``history`` command
        """
        self._resolver = resolver or ExecutableResolver()
        self._history = history if history is not None else CommandHistory()
        self._logger = get_logger('builtins')
        self._commands: dict[Builtin, Callable[[List[str]], BuiltinResult]] = {
            Builtin.ECHO: self.cmd_echo,
            Builtin.EXIT: self.cmd_exit,
            Builtin.TYPE: self.cmd_type,
            Builtin.PWD: self.cmd_pwd,
            Builtin.CD: self.cmd_cd,
            Builtin.HISTORY: self.cmd_history,
        }

        missing = set(Builtin) - set(self._commands)
        if missing:
            names = ", ".join(sorted(b.value for b in missing))
            raise TypeError(f"no handler for builtin(s): {names}")

    @property
    def history(self) -> CommandHistory:
        return self._history

    def is_builtin(self, name: str) -> bool:
        """Check if a command is built-in."""
        return Builtin.lookup(name) is not None

    def execute(self, name: str, args: List[str]) -> BuiltinResult:
        """
        Execute a built-in command.

        Args:
            name: Command name
            args: Command arguments

        Returns:
            The command's output and exit status

        Raises:
            KeyError: If ``name`` is not a builtin
            SystemExit: From ``exit``
        """
        builtin = Builtin.lookup(name)
        if builtin is None:
            raise KeyError(name)
        self._logger.debug("Running builtin", context={'name': name, 'argc': len(args)})
        return self._commands[builtin](list(args))

    # Command implementations

    def cmd_echo(self, args: List[str]) -> BuiltinResult:
        """Echo arguments."""
        return BuiltinResult(stdout=' '.join(args) + '\n')

    def cmd_exit(self, args: List[str]) -> BuiltinResult:
        """Terminate the shell process."""
        code = 0
        if args:
            try:
                code = int(args[0])
            except ValueError:
                code = 0
        self._logger.debug("Exiting", context={'code': code})
        sys.exit(code)

    def cmd_type(self, args: List[str]) -> BuiltinResult:
        """Describe how each name would be interpreted."""
        if not args:
            return BuiltinResult(stderr="type: missing operand\n", exit_code=1)

        result = BuiltinResult()
        for name in args:
            if self.is_builtin(name):
                result.stdout += f"{name} is a shell builtin\n"
                continue

            path = self._resolver.resolve(name)
            if path is not None:
                result.stdout += f"{name} is {path}\n"
            else:
                result.stderr += f"{name}: not found\n"
                result.exit_code = 1

        return result

    def cmd_pwd(self, args: List[str]) -> BuiltinResult:
        """Print working directory."""
        try:
            cwd = os.getcwd()
        except OSError as e:
            return BuiltinResult(stderr=f"pwd: {e.strerror or e}\n", exit_code=1)
        return BuiltinResult(stdout=cwd + '\n')

    def cmd_cd(self, args: List[str]) -> BuiltinResult:
        """Change directory."""
        if len(args) > 1:
            return BuiltinResult(stderr="cd: too many arguments\n", exit_code=1)

        requested = args[0] if args else '~'
        path = os.path.expanduser(requested)

        try:
            os.chdir(path)
        except FileNotFoundError:
            return BuiltinResult(
                stderr=f"cd: {requested}: No such file or directory\n",
                exit_code=1
            )
        except OSError as e:
            return BuiltinResult(
                stderr=f"cd: {requested}: {e.strerror or e}\n",
                exit_code=1
            )

        self._logger.debug("Changed directory", context={'path': path})
        return BuiltinResult()

    def cmd_history(self, args: List[str]) -> BuiltinResult:
        """Display command history."""
        entries = self._history.entries()

        if args:
            try:
                limit = int(args[0])
            except ValueError:
                return BuiltinResult(
                    stderr=f"history: {args[0]}: numeric argument required\n",
                    exit_code=1
                )
            entries = entries[-limit:] if limit > 0 else []

        return BuiltinResult(
            stdout=''.join(f"{index:>4}  {line}\n" for index, line in entries)
        )
