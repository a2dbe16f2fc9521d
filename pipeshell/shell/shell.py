"""
pipeshell Shell Module

The interactive read-execute loop.

Author: YSNRFD
Version: 1.0.0
"""

import sys
from typing import Optional, TextIO

from .builtins import BuiltinCommands
from .executor import PipelineExecutor
from .history import CommandHistory
from .parser import PipelineParser
from .resolver import ExecutableResolver
from pipeshell.core.config_loader import ShellConfig, get_config
from pipeshell.exceptions import ShellSyntaxError
from pipeshell.logger import get_logger


SYNTAX_ERROR_STATUS = 2


class Shell:
    """
    Interactive shell.

    Provides:
    - Prompting and line reading
    - Pipeline parsing
    - Builtin and external command execution
    - Command history

    Example:
        >>> shell = Shell()
        >>> shell.run()
    """

    def __init__(
        self,
        config: Optional[ShellConfig] = None,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
        resolver: Optional[ExecutableResolver] = None
    ):
        self._config = config or get_config().shell
        self._stdin = stdin
        self._stdout = stdout
        self._stderr = stderr
        self._logger = get_logger('shell')

        self._history = CommandHistory(self._config.history_size)
        self._resolver = resolver or ExecutableResolver()
        self._builtins = BuiltinCommands(self._resolver, self._history)
        self._parser = PipelineParser(
            strict_pipelines=self._config.strict_pipelines,
            strict_redirections=self._config.strict_redirections,
        )
        self._executor = PipelineExecutor(
            self._builtins,
            self._resolver,
            stdout=stdout,
            stderr=stderr,
            pipe_builtin_output=self._config.pipe_builtin_output,
        )

        self._running = False
        self._last_status = 0

    @property
    def history(self) -> CommandHistory:
        return self._history

    @property
    def parser(self) -> PipelineParser:
        return self._parser

    @property
    def last_status(self) -> int:
        """Exit status of the most recent pipeline."""
        return self._last_status

    @property
    def out(self) -> TextIO:
        return self._stdout or sys.stdout

    @property
    def err(self) -> TextIO:
        return self._stderr or sys.stderr

    def run(self) -> int:
        """
        Run the interactive shell until end of input.

        ``exit`` leaves through SystemExit and never returns here.

        Returns:
            0 once the input stream is exhausted
        """
        self._running = True
        self._logger.info("Shell started")

        while self._running:
            try:
                line = self._read_line()
            except KeyboardInterrupt:
                self.out.write("\n")
                continue
            except UnicodeDecodeError as e:
                # the undecodable chunk is consumed; keep reading after it
                self._logger.warning("Unreadable input", context={'reason': e.reason})
                self.err.write(f"pipeshell: cannot decode input: {e.reason}\n")
                self._last_status = SYNTAX_ERROR_STATUS
                continue

            if line is None:
                break

            try:
                self.execute_line(line)
            except KeyboardInterrupt:
                self.out.write("\n")
            except Exception as e:
                self._logger.exception("Unexpected error", exc=e)
                self.err.write(f"pipeshell: error: {e}\n")

        self._running = False
        self._logger.info("Shell stopped")
        return 0

    def stop(self) -> None:
        """Stop the loop after the current line."""
        self._running = False

    def _read_line(self) -> Optional[str]:
        """Show the prompt and read one line; None at end of input."""
        self.out.write(self._config.prompt)
        self.out.flush()

        stream = self._stdin or sys.stdin
        line = stream.readline()
        if line == "":
            return None
        return line.rstrip("\n")

    def execute_line(self, line: str) -> int:
        """
        Execute a command line.

        Args:
            line: Command line string

        Returns:
            Exit status
        """
        self._history.add(line)

        try:
            pipeline = self._parser.parse_line(line)
        except ShellSyntaxError as e:
            self.err.write(f"pipeshell: {e.message}\n")
            self._last_status = SYNTAX_ERROR_STATUS
            return self._last_status

        if pipeline is None:
            return self._last_status

        self._logger.debug(
            "Executing pipeline",
            context={
                'stages': len(pipeline.stages),
                'redirected': pipeline.redirection is not None,
            }
        )
        self._last_status = self._executor.execute(pipeline)
        return self._last_status


def create_shell(config: Optional[ShellConfig] = None) -> Shell:
    """Factory function to create a shell."""
    return Shell(config)
