"""Event primitives and process signal linkage for cleanup registries."""

from __future__ import annotations

import logging
import signal
import sys
import threading
import types
from collections.abc import Callable
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class Connection:
    """Handle for a callback connected to a :class:`Signal`.

    Parameters
    ----------
    signal : Signal
        Signal the callback is connected to
    callback : Callable[..., Any]
        Connected callback
    """

    def __init__(self, signal: Signal, callback: Callable[..., Any]) -> None:
        self._signal = signal
        self.callback = callback
        self.connected = True

    def disconnect(self) -> None:
        """Detach the callback. Calling this more than once is a no-op."""
        if not self.connected:
            return
        self.connected = False
        self._signal._remove(self)

    def __repr__(self) -> str:
        state = "connected" if self.connected else "disconnected"
        return f"<Connection {self._signal.name!r} {state}>"


class Signal:
    """Thread-safe event source with ordered callbacks.

    Parameters
    ----------
    name : str
        Name used in logs and reprs
    """

    def __init__(self, name: str = "signal") -> None:
        self.name = name
        self._lock = threading.RLock()
        self._connections: list[Connection] = []

    def connect(self, callback: Callable[..., Any]) -> Connection:
        """Connect a callback invoked on every :meth:`fire`.

        Parameters
        ----------
        callback : Callable[..., Any]
            Callable receiving the fired arguments

        Returns
        -------
        Connection
            Handle whose ``disconnect`` removes the callback
        """
        connection = Connection(self, callback)
        with self._lock:
            self._connections.append(connection)
        return connection

    def fire(self, *args: Any) -> None:
        """Invoke connected callbacks in connection order.

        Callbacks are snapshotted before the first one runs. A callback
        disconnected by an earlier one in the same fire is skipped. Callback
        errors are logged and do not stop the remaining callbacks.
        """
        with self._lock:
            connections = list(self._connections)

        for connection in connections:
            if not connection.connected:
                continue
            try:
                connection.callback(*args)
            except Exception:
                logger.exception("Callback %r for signal %r raised", connection.callback, self.name)

    def _remove(self, connection: Connection) -> None:
        with self._lock:
            if connection in self._connections:
                self._connections.remove(connection)

    def __len__(self) -> int:
        with self._lock:
            return len(self._connections)


class Resource:
    """Destroyable resource that announces its destruction.

    Parameters
    ----------
    name : str
        Name used in logs and reprs

    Attributes
    ----------
    destroying : Signal
        Fired once, with no arguments, when destruction begins
    destroyed : bool
        True once :meth:`destroy` has completed
    """

    def __init__(self, name: str = "resource") -> None:
        self.name = name
        self.destroying = Signal(f"{name}.destroying")
        self.destroyed = False
        self._destroying = False
        self._lock = threading.Lock()

    def destroy(self) -> None:
        """Fire :attr:`destroying` and mark the resource destroyed.

        Idempotent, including when called from a ``destroying`` callback.
        """
        with self._lock:
            if self._destroying:
                return
            self._destroying = True

        logger.debug("Destroying resource %r", self.name)
        self.destroying.fire()
        self.destroyed = True

    def __repr__(self) -> str:
        return f"<Resource {self.name!r}>"


class CleanupHandler(Protocol):
    """Protocol for registries linked to process signals."""

    def do_cleaning(self) -> None:
        """Run a cleanup pass."""
        ...


class SignalLinkManager:
    """Thread-safe set of registries cleaned on SIGINT/SIGTERM.

    Handlers are installed on first link and chain to whatever handler was
    installed before them.
    """

    SIGNALS = (signal.SIGINT, signal.SIGTERM)

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._handlers: list[CleanupHandler] = []
        self._previous: dict[int, Any] = {}

    def link(self, handler: CleanupHandler) -> None:
        """Run ``handler.do_cleaning`` when the process receives SIGINT/SIGTERM.

        Parameters
        ----------
        handler : CleanupHandler
            Registry to clean

        Raises
        ------
        ValueError
            If called from a thread other than the main thread while the
            signal handlers are not yet installed
        """
        with self._lock:
            if not self._previous:
                for signum in self.SIGNALS:
                    self._previous[signum] = signal.signal(signum, self._handle)
            if handler not in self._handlers:
                self._handlers.append(handler)

    def unlink(self, handler: CleanupHandler) -> None:
        """Stop cleaning ``handler`` on process signals."""
        with self._lock:
            if handler in self._handlers:
                self._handlers.remove(handler)

    def linked(self) -> list[CleanupHandler]:
        """Return the currently linked registries."""
        with self._lock:
            return list(self._handlers)

    def restore(self) -> None:
        """Reinstall the original signal handlers and drop every link."""
        with self._lock:
            for signum, previous in self._previous.items():
                if previous is not None:
                    signal.signal(signum, previous)
            self._previous.clear()
            self._handlers.clear()

    def _handle(self, signum: int, frame: types.FrameType | None) -> None:
        with self._lock:
            handlers = list(self._handlers)
            previous = self._previous.get(signum)

        logger.info("Received signal %s, cleaning %s linked registries", signum, len(handlers))

        for handler in handlers:
            try:
                handler.do_cleaning()
            except Exception:
                logger.exception("Cleanup on signal %s failed for %r", signum, handler)

        if callable(previous):
            previous(signum, frame)
        elif previous == signal.SIG_DFL:
            sys.exit(128 + signum)


_link_manager = SignalLinkManager()


def link_to_signals(handler: CleanupHandler) -> None:
    """Clean ``handler`` when the process receives SIGINT or SIGTERM.

    Parameters
    ----------
    handler : CleanupHandler
        Registry to clean
    """
    _link_manager.link(handler)


def unlink_from_signals(handler: CleanupHandler) -> None:
    """Remove a link made by :func:`link_to_signals`."""
    _link_manager.unlink(handler)
