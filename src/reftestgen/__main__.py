"""Entry point for running reftestgen directly.

Usage:
    python -m reftestgen
"""

import sys

from reftestgen.cli import main

if __name__ == "__main__":
    sys.exit(main())
