"""Global constants for the maid package.

Capability names used for duck-typed task classification, configuration
defaults, and environment variable names.
"""

from enum import Enum


class OnErrorAction(Enum):
    """Failure policy for a cleanup pass."""

    COLLECT = "collect"
    RAISE = "raise"


DEFAULT_ON_ERROR = OnErrorAction.COLLECT

DISCONNECT_METHODS = ("disconnect", "cancel")
"""Method names that mark a task as a cancellable connection.

Checked in order. ``cancel`` covers Python's own cancellable handles such as
``threading.Timer``, ``asyncio.Handle`` and futures.
"""

DESTROY_METHODS = ("destroy", "close")
"""Method names that mark a task as a destroyable resource.

Checked in order. ``close`` covers files, sockets and ``contextlib.ExitStack``.
"""

CONFIG_ENV_VAR = "MAID_CONFIG"
"""Environment variable naming the YAML configuration file."""

DEFAULT_CONFIG_FILE = "maid.yaml"
