"""
Journal Ripples — Entry Point.

`python main.py analyze ...` / `python main.py expand ...`; see ripples/cli.py.
"""

import logging
import sys

from ripples.config import settings

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

from ripples.cli import main

if __name__ == "__main__":
    sys.exit(main())
