"""
Executable Resolver

Maps a bare command name to the program the shell should run.

Author: YSNRFD
Version: 1.0.0
"""

import os
from typing import Optional, List

from pipeshell.logger import get_logger


class ExecutableResolver:
    """
    Looks commands up on the search path.

    Each directory of ``PATH`` is scanned in order and the first regular
    file with execute permission wins. The lookup is repeated for every
    call, so changes to ``PATH`` or to the directories are seen at once.

    Example:
        >>> ExecutableResolver().resolve('ls')
        '/usr/bin/ls'
    """

    def __init__(self, search_path: Optional[str] = None):
        """
        Args:
            search_path: Fixed search path; ``PATH`` is read at each
                lookup when omitted
        """
        self._search_path = search_path
        self._logger = get_logger('resolver')

    def directories(self) -> List[str]:
        """The directories searched, in order."""
        if self._search_path is not None:
            path = self._search_path
        else:
            path = os.environ.get('PATH', '')
        return [d for d in path.split(os.pathsep) if d]

    def resolve(self, name: str) -> Optional[str]:
        """
        Resolve a command name.

        Names containing a slash are checked as given.

        Returns:
            Absolute path of the program, or None if not found
        """
        if not name:
            return None

        if '/' in name:
            if self.is_executable(name):
                return os.path.abspath(name)
            return None

        for directory in self.directories():
            candidate = os.path.join(directory, name)
            if self.is_executable(candidate):
                resolved = os.path.abspath(candidate)
                self._logger.debug("Resolved command", context={'name': name, 'path': resolved})
                return resolved

        return None

    @staticmethod
    def is_executable(path: str) -> bool:
        return os.path.isfile(path) and os.access(path, os.X_OK)
