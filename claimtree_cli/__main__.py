"""
Module execution entry point.

Allows running with: python -m claimtree_cli
"""

import sys
from claimtree_cli.main import main

if __name__ == "__main__":
    sys.exit(main())
