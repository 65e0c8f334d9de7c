#!/usr/bin/env python3
"""
TidyDock
Application entry point
"""

import sys

from .cli import run_cli


if __name__ == "__main__":
    sys.exit(run_cli())
