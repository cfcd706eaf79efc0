"""Showdown - rock-paper-scissors with generated post-round commentary."""

__version__ = "0.1.0"
