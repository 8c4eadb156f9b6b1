"""Inspection route clustering and address resolution."""

__version__ = "1.0.0"
