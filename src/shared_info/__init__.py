"""Inventory shared libraries mapped by running Linux processes."""

__version__ = "0.1.0"
