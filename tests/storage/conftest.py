"""
Storage Test Configuration and Fixtures

This file contains pytest fixtures shared across storage tests.

To use pytest:
    pip install pytest
    pytest tests/storage/
"""

import tempfile
from collections import namedtuple
from pathlib import Path

import pytest

from storage.managers.segment_store import SegmentStore

DiskUsage = namedtuple("DiskUsage", ["total", "used", "free"])


# =============================================================================
# STORAGE FIXTURES
# =============================================================================

@pytest.fixture
def temp_storage_dir():
    """
    Provide a temporary directory for storage tests.

    Automatically cleaned up after test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def segment_store(temp_storage_dir):
    """
    Provide a SegmentStore with its working directory already created.

    Usage:
        def test_write(segment_store):
            segment_store.write(b"data", "video/webm")
    """
    store = SegmentStore()
    store.create(temp_storage_dir / "tmp")
    yield store
    store.dispose()


@pytest.fixture
def usage_stub():
    """
    Provide a shutil.disk_usage stand-in.

    Set .free to control readings, .error to make the query fail.
    Every queried path is recorded in .paths.
    """

    class UsageStub:
        def __init__(self):
            self.free = 10 * 1024**3
            self.error = None
            self.paths = []

        def __call__(self, path):
            self.paths.append(Path(path))
            if self.error:
                raise self.error
            return DiskUsage(total=self.free * 2, used=self.free, free=self.free)

    return UsageStub()


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================

def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, isolated)"
    )
    config.addinivalue_line(
        "markers", "slow: Slow tests"
    )
