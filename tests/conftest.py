"""
Pytest configuration for edge_profiling tests.

Puts src/ on sys.path so the tests run without an installed package.
"""

import os
import sys

import pytest

_src_dir = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src")
if _src_dir not in sys.path:
    sys.path.insert(0, _src_dir)

from edge_profiling.catalog import ExamplesCatalog  # noqa: E402
from edge_profiling.utils.logger import Logger  # noqa: E402


@pytest.fixture
def catalog():
    return ExamplesCatalog()


@pytest.fixture
def if_else_graph(catalog):
    return catalog.get("if-else").graph


@pytest.fixture(autouse=True)
def _silent_logger():
    """Keep the global logger detached between tests."""
    Logger.set_log_storage_strategy(None)
    Logger.set_min_priority(Logger.LogPriority.DEBUG)
    Logger.enable_logging()
    yield
    Logger.set_log_storage_strategy(None)
    Logger.set_min_priority(Logger.LogPriority.DEBUG)
    Logger.enable_logging()
