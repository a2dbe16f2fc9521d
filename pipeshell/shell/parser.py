"""
Pipeline Parser Module

Groups shell words into pipeline stages and extracts the trailing
redirection of the final stage.

Author: YSNRFD
Version: 1.0.0
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, List, Sequence, Tuple

from .lexer import PIPE, WordSplitter
from pipeshell.exceptions import PipelineSyntaxError, RedirectionSyntaxError
from pipeshell.logger import get_logger


class RedirectMode(Enum):
    """Where a redirection sends output and whether it truncates."""
    OVERWRITE_STDOUT = ">"
    APPEND_STDOUT = ">>"
    OVERWRITE_STDERR = "2>"
    APPEND_STDERR = "2>>"

    @property
    def stream(self) -> str:
        """Name of the redirected stream, 'stdout' or 'stderr'."""
        if self in (RedirectMode.OVERWRITE_STDERR, RedirectMode.APPEND_STDERR):
            return "stderr"
        return "stdout"

    @property
    def append(self) -> bool:
        return self in (RedirectMode.APPEND_STDOUT, RedirectMode.APPEND_STDERR)


REDIRECT_OPERATORS: dict[str, RedirectMode] = {
    ">": RedirectMode.OVERWRITE_STDOUT,
    "1>": RedirectMode.OVERWRITE_STDOUT,
    ">>": RedirectMode.APPEND_STDOUT,
    "1>>": RedirectMode.APPEND_STDOUT,
    "2>": RedirectMode.OVERWRITE_STDERR,
    "2>>": RedirectMode.APPEND_STDERR,
}


@dataclass(frozen=True)
class Stage:
    """One command of a pipeline."""
    command: str
    arguments: Tuple[str, ...] = ()

    @property
    def argv(self) -> List[str]:
        return [self.command, *self.arguments]


@dataclass(frozen=True)
class Redirection:
    """A file redirection of the final stage."""
    mode: RedirectMode
    target: str


@dataclass(frozen=True)
class Pipeline:
    """
    A parsed command line.

    Attributes:
        stages: Commands in left-to-right order, never empty
        redirection: Redirection of the last stage, if any
    """
    stages: Tuple[Stage, ...]
    redirection: Optional[Redirection] = None

    def __post_init__(self):
        if not self.stages:
            raise ValueError("a pipeline needs at least one stage")

    @property
    def last(self) -> Stage:
        return self.stages[-1]


def _is_operator(word: str) -> bool:
    return not getattr(word, 'quoted', False)


class PipelineParser:
    """
    Parses shell words into a Pipeline.

    Handles:
    - Pipes (|) between stages
    - Redirections (>, >>, 1>, 1>>, 2>, 2>>) on the final stage

    Malformed input is absorbed by default: empty stages are dropped
    and an operator without a target is ignored. ``strict_pipelines``
    and ``strict_redirections`` turn those cases into syntax errors.

    Example:
        >>> parser = PipelineParser()
        >>> pipeline = parser.parse_line("ls -la | grep test > output.txt")
        >>> [stage.command for stage in pipeline.stages]
        ['ls', 'grep']
    """

    def __init__(
        self,
        strict_pipelines: bool = False,
        strict_redirections: bool = False,
        splitter: Optional[WordSplitter] = None
    ):
        self._strict_pipelines = strict_pipelines
        self._strict_redirections = strict_redirections
        self._splitter = splitter or WordSplitter()
        self._logger = get_logger('parser')

    def parse_line(self, line: str) -> Optional[Pipeline]:
        """
        Split and parse a raw command line.

        Returns:
            Pipeline, or None if the line holds no command

        Raises:
            ShellSyntaxError: On unterminated quotes or, in strict
                mode, malformed pipes and redirections
        """
        return self.parse(self._splitter.split(line))

    def parse(self, words: Sequence[str]) -> Optional[Pipeline]:
        """
        Parse words into a Pipeline.

        Args:
            words: Words as produced by the WordSplitter; plain strings
                are treated as unquoted

        Returns:
            Pipeline, or None if every stage is empty
        """
        groups = self._split_groups(words)
        stages: List[Stage] = []
        redirection: Optional[Redirection] = None

        for index, group in enumerate(groups):
            stage, stage_redirection = self._parse_stage(group)
            stages.append(stage)
            if index == len(groups) - 1:
                redirection = stage_redirection
            elif stage_redirection is not None:
                self._logger.debug(
                    "Discarding redirection of non-final stage",
                    context={'stage': index, 'target': stage_redirection.target}
                )

        if not stages:
            return None

        return Pipeline(stages=tuple(stages), redirection=redirection)

    def _split_groups(self, words: Sequence[str]) -> List[List[str]]:
        """Partition words at unquoted pipe tokens, dropping empty groups."""
        groups: List[List[str]] = []
        current: List[str] = []
        saw_pipe = False

        for word in words:
            if word == PIPE and _is_operator(word):
                saw_pipe = True
                if current:
                    groups.append(current)
                elif self._strict_pipelines:
                    raise PipelineSyntaxError()
                current = []
            else:
                current.append(word)

        if current:
            groups.append(current)
        elif saw_pipe and self._strict_pipelines:
            raise PipelineSyntaxError()

        return groups

    def _parse_stage(self, group: List[str]) -> Tuple[Stage, Optional[Redirection]]:
        """Parse one group into a stage and its redirection, if any."""
        command = str(group[0])
        arguments: List[str] = []
        redirection: Optional[Redirection] = None

        for position in range(1, len(group)):
            word = group[position]
            mode = REDIRECT_OPERATORS.get(word) if _is_operator(word) else None
            if mode is None:
                arguments.append(str(word))
                continue

            if position + 1 < len(group):
                redirection = Redirection(mode=mode, target=str(group[position + 1]))
                ignored = group[position + 2:]
                if ignored:
                    self._logger.debug(
                        "Ignoring words after redirection target",
                        context={'command': command, 'ignored': len(ignored)}
                    )
            elif self._strict_redirections:
                raise RedirectionSyntaxError(str(word))
            else:
                self._logger.debug(
                    "Dropping redirection without target",
                    context={'command': command, 'operator': str(word)}
                )
            break

        return Stage(command=command, arguments=tuple(arguments)), redirection
