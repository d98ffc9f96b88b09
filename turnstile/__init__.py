"""Serialize CI workflow runs across related repositories."""

__version__ = "0.1.0"
