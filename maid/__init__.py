"""Deferred-cleanup task registry."""

from __future__ import annotations

from maid.constants import OnErrorAction
from maid.core import (
    Connection,
    Maid,
    Resource,
    Signal,
    TaskKind,
    classify_task,
    dispose_task,
    link_to_signals,
    unlink_from_signals,
)
from maid.core.config import ConfigLoader
from maid.exceptions import CleanupError, MaidError

__version__ = "0.1.0"

__all__ = [
    "Maid",
    "OnErrorAction",
    "TaskKind",
    "classify_task",
    "dispose_task",
    "Signal",
    "Connection",
    "Resource",
    "link_to_signals",
    "unlink_from_signals",
    "ConfigLoader",
    "CleanupError",
    "MaidError",
]
