"""Data access helpers for the voting core."""
