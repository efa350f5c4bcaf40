"""Autoplan - constraint-based automatic task scheduling."""

__version__ = "0.1.0"
