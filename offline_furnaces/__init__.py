"""Turns off furnaces when players go offline."""

__version__ = "1.0.0"
