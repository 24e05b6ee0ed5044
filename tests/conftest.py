"""Test fixtures for Taskiq, in-memory stores, and async runtime."""

import os
import sys
from collections.abc import AsyncIterator, Iterator
from pathlib import Path

os.environ["TASKIQ_TESTING"] = "1"

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

import pytest

from finder.config import get_settings
from finder.sessions import clear_memory_sessions
from finder.taskiq_app.broker import broker
from finder.taskiq_app.dedup import clear_memory_locks


@pytest.fixture(autouse=True)
def reset_memory_stores() -> Iterator[None]:
    clear_memory_locks()
    clear_memory_sessions()
    yield
    clear_memory_locks()
    clear_memory_sessions()


@pytest.fixture
def clear_settings_cache() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
async def init_taskiq() -> AsyncIterator[None]:
    """Initialize broker per test when using InMemoryBroker."""

    await broker.startup()
    yield
    await broker.shutdown()


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
