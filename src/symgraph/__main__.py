"""
Entry point for module execution (``python -m symgraph``).

This module delegates execution to the CLI handler in ``symgraph.cli.__main__``.
"""

import sys
from symgraph.cli.__main__ import main

if __name__ == "__main__":
  sys.exit(main())
