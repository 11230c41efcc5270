"""Nebula marketplace — catalog, asset delivery and client install state."""

__version__ = "0.1.0"
