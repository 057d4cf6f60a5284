"""Logging helpers for maid."""

from maid.logging.formatters import TaskFormatter

__all__ = ["TaskFormatter"]
