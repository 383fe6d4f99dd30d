"""Freeform workout text parser with benchmark matching."""

__version__ = "0.1.0"
