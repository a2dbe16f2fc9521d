"""
Pipeline Executor

Runs a parsed Pipeline: builtins in-process, everything else as child
processes whose standard streams are chained with pipes.

Author: YSNRFD
Version: 1.0.0
"""

import os
import subprocess
import sys
import tempfile
from contextlib import ExitStack
from dataclasses import dataclass
from typing import Optional, Any, List, BinaryIO, TextIO

from .builtins import BuiltinCommands, BuiltinResult
from .parser import Pipeline, Redirection, Stage
from .resolver import ExecutableResolver
from pipeshell.exceptions import (
    ExecutionError,
    CommandNotFoundError,
    SpawnError,
    RedirectionError,
)
from pipeshell.logger import get_logger


ENCODING = 'utf-8'
# surrogates from undecodable input bytes are written back as those bytes
ENCODING_ERRORS = 'surrogateescape'


@dataclass
class SpawnedStage:
    """A stage running as a child process."""
    stage: Stage
    process: subprocess.Popen

    @property
    def pid(self) -> int:
        return self.process.pid


def exit_status(returncode: Optional[int]) -> int:
    """Map a Popen return code to a shell exit status."""
    if returncode is None:
        return 1
    if returncode < 0:
        return 128 - returncode
    return returncode


class PipelineExecutor:
    """
    Executes pipelines.

    Stream wiring for stage ``i`` of ``n``:
    - stdin comes from stage ``i-1``, or is the shell's own stdin
    - stdout goes into a fresh pipe when ``i < n-1``, into the
      redirection target for the last stage, or to the shell's stdout
    - stderr is the shell's stderr unless the last stage has a
      stderr redirection

    Every external stage is started before any is waited on. All pipe
    ends, buffers and the redirection file live in one ExitStack, and
    the shell's copy of a pipe end is closed as soon as a child owns it.

    Example:
        >>> executor = PipelineExecutor(BuiltinCommands())
        >>> executor.execute(PipelineParser().parse_line("ls | wc -l"))
        0
    """

    def __init__(
        self,
        builtins: BuiltinCommands,
        resolver: Optional[ExecutableResolver] = None,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
        pipe_builtin_output: bool = True
    ):
        """
        Args:
            builtins: Dispatcher for builtin stages
            resolver: Maps command names to programs
            stdout: Where builtin output goes (sys.stdout by default)
            stderr: Where diagnostics go (sys.stderr by default)
            pipe_builtin_output: Feed a non-final builtin's output to
                the next stage instead of printing it
        """
        self._builtins = builtins
        self._resolver = resolver or ExecutableResolver()
        self._stdout = stdout
        self._stderr = stderr
        self._pipe_builtin_output = pipe_builtin_output
        self._logger = get_logger('executor')

    @property
    def out(self) -> TextIO:
        return self._stdout or sys.stdout

    @property
    def err(self) -> TextIO:
        return self._stderr or sys.stderr

    def execute(self, pipeline: Pipeline) -> int:
        """
        Run a pipeline to completion.

        Returns:
            Exit status of the last stage, 127 if a command was not
            found, 126 if one could not be started, 1 if the
            redirection target could not be opened
        """
        spawned: List[SpawnedStage] = []
        status: Optional[int] = None

        try:
            with ExitStack() as stack:
                redirect_file = self._open_redirection(pipeline.redirection, stack)
                status = self._launch(pipeline, redirect_file, stack, spawned)
        except ExecutionError as e:
            self._report(e.message)
            self._logger.debug("Pipeline aborted", context={'error': e.error_code})
            status = e.status
        finally:
            interrupted = self._wait_all(spawned)
            self._flush()

        if interrupted:
            raise KeyboardInterrupt

        if status is None:
            status = exit_status(spawned[-1].process.returncode) if spawned else 0
        return status

    def _launch(
        self,
        pipeline: Pipeline,
        redirect_file: Optional[BinaryIO],
        stack: ExitStack,
        spawned: List[SpawnedStage]
    ) -> Optional[int]:
        """
        Start every stage in order.

        Returns the exit code when the last stage is a builtin, None
        when it was spawned.
        """
        stdin_source: Optional[BinaryIO] = None
        last_index = len(pipeline.stages) - 1

        for index, stage in enumerate(pipeline.stages):
            is_last = index == last_index

            if self._builtins.is_builtin(stage.command):
                # builtins never read stdin
                if stdin_source is not None:
                    stdin_source.close()
                result = self._builtins.execute(stage.command, list(stage.arguments))
                if is_last:
                    self._emit_final(result, pipeline.redirection, redirect_file)
                    return result.exit_code
                stdin_source = self._emit_intermediate(result, stack)
                continue

            path = self._resolver.resolve(stage.command)
            if path is None:
                raise CommandNotFoundError(stage.command)

            stdout_sink: Optional[Any] = None
            stderr_sink: Optional[Any] = None
            reader: Optional[BinaryIO] = None
            writer: Optional[BinaryIO] = None

            if not is_last:
                reader, writer = self._open_pipe(stack)
                stdout_sink = writer
            elif pipeline.redirection is not None:
                if pipeline.redirection.mode.stream == 'stdout':
                    stdout_sink = redirect_file
                else:
                    stderr_sink = redirect_file

            try:
                process = self._spawn(stage, path, stdin_source, stdout_sink, stderr_sink)
            finally:
                if writer is not None:
                    writer.close()
                if stdin_source is not None:
                    stdin_source.close()

            spawned.append(SpawnedStage(stage=stage, process=process))
            stdin_source = reader

        return None

    def _open_redirection(
        self,
        redirection: Optional[Redirection],
        stack: ExitStack
    ) -> Optional[BinaryIO]:
        """Open the redirection target, creating it if absent."""
        if redirection is None:
            return None

        mode = 'ab' if redirection.mode.append else 'wb'
        try:
            handle = open(redirection.target, mode)
        except OSError as e:
            raise RedirectionError(redirection.target, e.strerror or str(e))

        self._logger.debug(
            "Opened redirection target",
            context={'target': redirection.target, 'mode': redirection.mode.value}
        )
        return stack.enter_context(handle)

    @staticmethod
    def _open_pipe(stack: ExitStack):
        """Create a pipe; both ends are closed when the stack unwinds."""
        read_fd, write_fd = os.pipe()
        reader = stack.enter_context(os.fdopen(read_fd, 'rb', buffering=0))
        writer = stack.enter_context(os.fdopen(write_fd, 'wb', buffering=0))
        return reader, writer

    def _spawn(
        self,
        stage: Stage,
        path: str,
        stdin: Optional[Any],
        stdout: Optional[Any],
        stderr: Optional[Any]
    ) -> subprocess.Popen:
        """Start one external stage."""
        # builtin output written so far must come before the child's
        self._flush()
        try:
            process = subprocess.Popen(
                stage.argv,
                executable=path,
                stdin=stdin,
                stdout=stdout,
                stderr=stderr,
            )
        except OSError as e:
            raise SpawnError(stage.command, e.strerror or str(e), path=path)

        self._logger.debug(
            "Spawned stage",
            context={'command': stage.command, 'pid': process.pid}
        )
        return process

    def _emit_intermediate(
        self,
        result: BuiltinResult,
        stack: ExitStack
    ) -> Optional[BinaryIO]:
        """
        Handle the output of a builtin that is not the last stage.

        Returns the stdin source for the next stage.
        """
        if result.stderr:
            self.err.write(result.stderr)

        if not self._pipe_builtin_output:
            self.out.write(result.stdout)
            return None

        # A temporary file instead of a pipe: nothing reads it until the
        # next stage is started, and a pipe would block on large output.
        buffer = stack.enter_context(tempfile.TemporaryFile())
        buffer.write(result.stdout.encode(ENCODING, ENCODING_ERRORS))
        buffer.seek(0)
        return buffer

    def _emit_final(
        self,
        result: BuiltinResult,
        redirection: Optional[Redirection],
        redirect_file: Optional[BinaryIO]
    ) -> None:
        """Write the output of a builtin that is the last stage."""
        stdout_text, stderr_text = result.stdout, result.stderr

        if redirection is not None and redirect_file is not None:
            if redirection.mode.stream == 'stdout':
                redirect_file.write(stdout_text.encode(ENCODING, ENCODING_ERRORS))
                stdout_text = ""
            else:
                redirect_file.write(stderr_text.encode(ENCODING, ENCODING_ERRORS))
                stderr_text = ""
            redirect_file.flush()

        if stdout_text:
            self.out.write(stdout_text)
        if stderr_text:
            self.err.write(stderr_text)

    def _wait_all(self, spawned: List[SpawnedStage]) -> bool:
        """
        Wait on every spawned stage in spawn order.

        An interrupt does not stop the loop; the interrupted wait is
        retried.

        Returns:
            True if a wait was interrupted at least once
        """
        interrupted = False
        for entry in spawned:
            while True:
                try:
                    entry.process.wait()
                except KeyboardInterrupt:
                    interrupted = True
                    self._logger.debug("Wait interrupted", context={'pid': entry.pid})
                    continue
                except OSError as e:
                    self._report(f"{entry.stage.command}: {e.strerror or e}")
                    self._logger.warning(
                        "Wait failed",
                        context={'command': entry.stage.command, 'pid': entry.pid}
                    )
                break

            self._logger.debug(
                "Stage finished",
                context={
                    'command': entry.stage.command,
                    'pid': entry.pid,
                    'returncode': entry.process.returncode,
                }
            )

        return interrupted

    def _report(self, message: str) -> None:
        self.err.write(message + '\n')

    def _flush(self) -> None:
        self.out.flush()
        self.err.flush()
