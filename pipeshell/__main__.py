import sys

from pipeshell.main import main

sys.exit(main())
