"""Exceptions raised by maid."""

from __future__ import annotations

from typing import Any


class MaidError(Exception):
    """Base exception for maid failures."""


class CleanupError(MaidError):
    """Raised when one or more tasks fail during a cleanup pass.

    Parameters
    ----------
    errors : list[Exception]
        Errors raised by failing tasks, in disposal order
    tasks : list[Any]
        Tasks that failed, parallel to ``errors``
    """

    def __init__(self, errors: list[Exception], tasks: list[Any]) -> None:
        count = len(errors)
        noun = "task" if count == 1 else "tasks"
        super().__init__(f"Cleanup completed with {count} failed {noun}: {errors[0]!r}")
        self.errors = errors
        self.tasks = tasks
