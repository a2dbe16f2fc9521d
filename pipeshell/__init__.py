"""
pipeshell - the command-execution core of an interactive shell

Tokenizes a command line, parses pipelines and redirections, runs
builtins in-process and everything else as chained child processes.
"""

__version__ = "1.0.0"
__author__ = "YSNRFD"

from .shell.shell import Shell, create_shell
from .shell.parser import PipelineParser, Pipeline, Stage, Redirection, RedirectMode
from .shell.executor import PipelineExecutor

__all__ = [
    'Shell',
    'create_shell',
    'PipelineParser',
    'Pipeline',
    'Stage',
    'Redirection',
    'RedirectMode',
    'PipelineExecutor',
]
