"""
Entry point for running exprcalc as a module.

Usage:
    python -m exprcalc eval "1 + 2 * 3"
    python -m exprcalc repl
"""

import sys

from exprcalc.cli import main

if __name__ == "__main__":
    sys.exit(main())
