"""Classification and disposal of cleanup tasks."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from maid.constants import DESTROY_METHODS, DISCONNECT_METHODS

logger = logging.getLogger(__name__)


class TaskKind(Enum):
    """Shapes a cleanup task can take, in dispatch precedence order."""

    REGISTRY = "registry"
    CONNECTION = "connection"
    THREAD = "thread"
    RESOURCE = "resource"
    FUNCTION = "function"


@runtime_checkable
class Disconnectable(Protocol):
    """A cancellable connection, e.g. a signal subscription."""

    def disconnect(self) -> None:
        """Cancel the connection."""
        ...


@runtime_checkable
class Destroyable(Protocol):
    """A resource with ownership/destroy semantics."""

    def destroy(self) -> None:
        """Release the resource."""
        ...


class SignalLike(Protocol):
    """Event source accepting zero-argument callbacks."""

    def connect(self, callback: Callable[..., Any]) -> Any:
        """Register ``callback`` and return a subscription handle."""
        ...


class DestructionObservable(Destroyable, Protocol):
    """A destroyable resource that announces when it starts being destroyed."""

    destroying: SignalLike


def _find_method(task: Any, names: tuple[str, ...]) -> Callable[[], Any] | None:
    for name in names:
        method = getattr(task, name, None)
        if method is not None and callable(method):
            return method
    return None


def classify_task(task: Any) -> TaskKind:
    """Determine how a task should be disposed.

    Parameters
    ----------
    task : Any
        Any value given to a registry

    Returns
    -------
    TaskKind
        Kind used by :func:`dispose_task`

    Notes
    -----
    Precedence is fixed: disconnect capability, then suspended
    generator/coroutine, then destroy capability, then plain call. A value
    exposing both ``disconnect`` and ``destroy`` is a connection. Only
    :class:`~maid.core.registry.Maid` instances are registries; their
    ``disconnect`` and ``destroy`` aliases run the same pass, so checking
    them first does not change the outcome. Other objects exposing
    ``do_cleaning`` go through the capability chain like any other value.

    Classes are always called, never inspected for capabilities, since
    their methods are unbound.
    """
    if isinstance(task, type):
        return TaskKind.FUNCTION

    from maid.core.registry import Maid

    if isinstance(task, Maid):
        return TaskKind.REGISTRY

    if _find_method(task, DISCONNECT_METHODS) is not None:
        return TaskKind.CONNECTION

    if inspect.isgenerator(task) or inspect.iscoroutine(task):
        return TaskKind.THREAD

    if _find_method(task, DESTROY_METHODS) is not None:
        return TaskKind.RESOURCE

    return TaskKind.FUNCTION


def dispose_task(task: Any, kind: TaskKind | None = None) -> TaskKind:
    """Run the release operation matching a task's kind.

    Parameters
    ----------
    task : Any
        Task to dispose
    kind : TaskKind | None
        Pre-computed kind, classified from ``task`` when omitted

    Returns
    -------
    TaskKind
        Kind the task was disposed as

    Raises
    ------
    TypeError
        If the task has no recognized shape and is not callable
    Exception
        Whatever the task's own release operation raises
    """
    if kind is None:
        kind = classify_task(task)

    if kind is TaskKind.REGISTRY:
        task.do_cleaning()
    elif kind is TaskKind.CONNECTION:
        _find_method(task, DISCONNECT_METHODS)()
    elif kind is TaskKind.THREAD:
        # GeneratorExit is thrown into the frame; only its finally clauses run.
        task.close()
    elif kind is TaskKind.RESOURCE:
        _find_method(task, DESTROY_METHODS)()
    else:
        task()

    logger.debug("Disposed %s task %r", kind.value, task, extra={"task_kind": kind.value})
    return kind
