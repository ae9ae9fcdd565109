"""Slot availability core for a permanent-makeup studio's admin console."""

__version__ = "0.1.0"
