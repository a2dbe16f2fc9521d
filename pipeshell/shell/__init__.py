"""
pipeshell Shell Module

Provides the command-execution core:
- Word splitting
- Pipeline parsing
- Built-in commands
- Executable resolution
- Pipeline execution
- The interactive loop
"""

from .lexer import Word, WordSplitter, split_words
from .parser import (
    PipelineParser,
    Pipeline,
    Stage,
    Redirection,
    RedirectMode,
    REDIRECT_OPERATORS,
)
from .builtins import Builtin, BuiltinCommands, BuiltinResult
from .history import CommandHistory
from .resolver import ExecutableResolver
from .executor import PipelineExecutor, SpawnedStage
from .shell import Shell, create_shell

__all__ = [
    'Word',
    'WordSplitter',
    'split_words',
    'PipelineParser',
    'Pipeline',
    'Stage',
    'Redirection',
    'RedirectMode',
    'REDIRECT_OPERATORS',
    'Builtin',
    'BuiltinCommands',
    'BuiltinResult',
    'CommandHistory',
    'ExecutableResolver',
    'PipelineExecutor',
    'SpawnedStage',
    'Shell',
    'create_shell',
]
