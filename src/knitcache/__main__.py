"""Entry point for ``python -m knitcache``."""

import sys

from knitcache.ui.cli import main

if __name__ == "__main__":
    sys.exit(main())
