#!/usr/bin/env python3
"""
pipeshell - entry point

Start-up sequence:
1. Load configuration (PIPESHELL_CONFIG, the user config file, or defaults)
2. Initialize logging
3. Run the interactive shell until end of input or ``exit``

Author: YSNRFD
Version: 1.0.0
"""

import sys
from typing import Optional, TextIO

from pipeshell.core.config_loader import ConfigLoader
from pipeshell.exceptions import ConfigError
from pipeshell.logger import Logger, LogLevel, get_logger
from pipeshell.shell.shell import Shell


CONFIG_ERROR_STATUS = 2


def main(stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> int:
    """
    Main entry point for pipeshell.

    Returns:
        Process exit status when the input stream closes
    """
    loader = ConfigLoader()
    try:
        config = loader.load_default()
    except ConfigError as e:
        sys.stderr.write(f"pipeshell: {e.message}\n")
        return CONFIG_ERROR_STATUS

    Logger.initialize(
        level=LogLevel.from_name(loader.get('logging.level', 'WARNING')),
        log_file=loader.get('logging.log_file') or None,
        use_colors=loader.get('logging.use_colors', True),
    )
    get_logger('shell').debug("Configuration loaded", context={'path': loader.path})

    shell = Shell(config.shell, stdin=stdin, stdout=stdout)
    return shell.run()


if __name__ == '__main__':
    sys.exit(main())
