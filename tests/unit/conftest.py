"""Pytest configuration and fixtures for maid tests."""

import os
from collections.abc import Generator

import pytest

from maid.core.signals import _link_manager


@pytest.fixture(autouse=True)
def cleanup_config_env() -> Generator[None, None, None]:
    """Ensure MAID_CONFIG is not set for unit tests.

    Yields
    ------
    None
        Control back to test after ensuring clean environment
    """
    original_config = os.environ.pop("MAID_CONFIG", None)

    yield

    if original_config is not None:
        os.environ["MAID_CONFIG"] = original_config
    else:
        os.environ.pop("MAID_CONFIG", None)


@pytest.fixture
def restore_signal_links() -> Generator[None, None, None]:
    """Reinstall original SIGINT/SIGTERM handlers after a test links registries.

    Yields
    ------
    None
        Control back to test
    """
    yield

    _link_manager.restore()


@pytest.fixture
def log() -> list[str]:
    """Shared disposal log for fake tasks.

    Returns
    -------
    list[str]
        Empty list that fakes append disposal records to
    """
    return []
