"""Noisemaker — synthetic endpoint activity generator with a CSV activity log."""

__version__ = "0.1.0"
