"""
Allow running cobractl as a module: python -m cobrafacil.cli
"""

import sys
from .cobractl import main

if __name__ == "__main__":
    sys.exit(main())
