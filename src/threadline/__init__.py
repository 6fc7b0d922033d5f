"""Threadline: community discussion backend, voting and score consistency core."""

__version__ = "0.1.0"
