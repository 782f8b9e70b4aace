"""
Allow running the usage monitor as a Python module.

Usage:
    python -m usage_monitor

This is equivalent to running:
    python run_monitor.py
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
