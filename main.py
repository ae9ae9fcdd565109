"""
Studio slot availability entry point.

Runs the command line against the configured JSON document store.

Usage:
    Slots for a day:   python main.py slots 2026-10-19
    Next free date:    python main.py next --weekend
"""

import sys

from studio_booking.cli import main

if __name__ == "__main__":
    sys.exit(main())
