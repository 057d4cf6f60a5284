"""Core maid functionality."""

from __future__ import annotations

from maid.core.registry import Maid
from maid.core.signals import (
    Connection,
    Resource,
    Signal,
    link_to_signals,
    unlink_from_signals,
)
from maid.core.tasks import TaskKind, classify_task, dispose_task

__all__ = [
    "Maid",
    "TaskKind",
    "classify_task",
    "dispose_task",
    "Signal",
    "Connection",
    "Resource",
    "link_to_signals",
    "unlink_from_signals",
]
