"""Deferred-cleanup task registry."""

from __future__ import annotations

import logging
import threading
import types
from typing import Any, TypeVar

from maid.constants import DEFAULT_ON_ERROR, OnErrorAction
from maid.core.tasks import DestructionObservable, classify_task, dispose_task
from maid.exceptions import CleanupError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Maid:
    """Accumulates cleanup tasks and disposes of them in a single pass.

    A task is any of:

    - a zero-argument callable, which is called;
    - a connection exposing ``disconnect`` (or ``cancel``), which is disconnected;
    - a suspended generator or coroutine, which is closed without resuming;
    - a resource exposing ``destroy`` (or ``close``), which is destroyed;
    - another ``Maid``, which runs its own cleanup pass.

    Parameters
    ----------
    on_error : OnErrorAction | str | None
        Failure policy for cleanup passes. ``collect`` (default) disposes every
        task and raises :class:`~maid.exceptions.CleanupError` afterwards;
        ``raise`` propagates the first failure and drops the remaining tasks.

    Notes
    -----
    ``give_task`` and the snapshot taken by ``do_cleaning`` are serialized by a
    re-entrant lock. Tasks are disposed outside the lock, so a task may give
    new tasks to, or clean, the registry that is disposing it.
    """

    def __init__(self, on_error: OnErrorAction | str | None = None) -> None:
        self.on_error = OnErrorAction(on_error) if on_error is not None else DEFAULT_ON_ERROR
        self._lock = threading.RLock()
        self._tasks: list[Any] = []

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> Maid:
        """Create a registry from a loaded configuration.

        Parameters
        ----------
        config : dict[str, Any]
            Configuration returned by ``ConfigLoader.load_config``

        Returns
        -------
        Maid
            New empty registry using the configured failure policy
        """
        section = config.get("maid") or {}
        return cls(on_error=section.get("on_error"))

    def give_task(self, task: T) -> T:
        """Register a task for the next cleanup pass.

        The task's shape is not checked until it is disposed.

        Parameters
        ----------
        task : T
            Callable, connection, resource, generator, coroutine or registry

        Returns
        -------
        T
            The task itself
        """
        with self._lock:
            self._tasks.append(task)
        logger.debug("Registered task %r", task)
        return task

    def link_to_resource(
        self, resource: DestructionObservable, destroy_resource: bool = True
    ) -> Any:
        """Run a cleanup pass when ``resource`` starts being destroyed.

        Parameters
        ----------
        resource : DestructionObservable
            Object exposing ``destroying.connect(callback)`` and ``destroy()``
        destroy_resource : bool
            Also register ``resource`` itself, so a manual pass destroys it

        Returns
        -------
        Any
            Subscription handle returned by ``resource.destroying.connect``

        Notes
        -----
        The subscription is registered before the resource, so a manual pass
        disconnects the listener before destroying the resource. When the
        resource is destroyed first, the pass triggered by its notification
        calls ``destroy`` on it again, which must therefore be idempotent.
        """
        subscription = resource.destroying.connect(self._on_linked_destroying)
        self.give_task(subscription)
        if destroy_resource:
            self.give_task(resource)
        logger.debug("Linked to resource %r", resource)
        return subscription

    def _on_linked_destroying(self, *_args: Any) -> None:
        self.do_cleaning()

    def do_cleaning(self) -> None:
        """Dispose every task registered before this call.

        Raises
        ------
        CleanupError
            If one or more tasks failed under the ``collect`` policy
        Exception
            The first task failure under the ``raise`` policy

        Notes
        -----
        The task list is swapped for an empty one before the first task is
        disposed. Tasks given during the pass are left for the next pass, and
        a nested call on this registry during the pass finds nothing to do.
        Tasks are disposed in insertion order, each exactly once.
        """
        with self._lock:
            tasks = self._tasks
            self._tasks = []

        if not tasks:
            return

        errors: list[Exception] = []
        failed: list[Any] = []

        try:
            for task in tasks:
                kind_name = "unknown"
                try:
                    kind = classify_task(task)
                    kind_name = kind.value
                    dispose_task(task, kind)
                except Exception as e:
                    if self.on_error is OnErrorAction.RAISE:
                        raise
                    logger.error(
                        "Error disposing %s task %r: %s",
                        kind_name,
                        task,
                        e,
                        extra={"task_kind": kind_name},
                    )
                    errors.append(e)
                    failed.append(task)
        finally:
            disposed = len(tasks)
            tasks.clear()

        if errors:
            logger.info("Cleanup completed with %s errors", len(errors))
            raise CleanupError(errors, failed) from errors[0]

        logger.debug("Cleaned up %s tasks", disposed)

    disconnect = do_cleaning
    destroy = do_cleaning
    close = do_cleaning

    def __enter__(self) -> Maid:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: types.TracebackType | None,
    ) -> None:
        self.do_cleaning()

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)

    def __bool__(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"<Maid tasks={len(self)} on_error={self.on_error.value}>"
