# vardump/__main__.py
"""Entry point for ``python -m vardump``."""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
