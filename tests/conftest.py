# tests/conftest.py
import logging
import os
import sys
from unittest.mock import MagicMock

import pytest

# Make sure `src/` is on the import path
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
sys.path.insert(0, os.path.join(ROOT, "src"))

from api.circuit_breaker import circuit_breaker_manager  # noqa: E402
from api.models import FileRecord, StorageStats  # noqa: E402
from ui.filters.model import DEFAULT_FILTERS  # noqa: E402
from ui.filters.scheduling import CooperativeScheduler, ManualClock  # noqa: E402
from ui.filters.synchronizer import FilterSynchronizer  # noqa: E402


@pytest.fixture(autouse=True)
def reset_circuit_breakers():
    """Breakers are process-global; start every test with closed ones."""
    circuit_breaker_manager.reset()
    yield
    circuit_breaker_manager.reset()


@pytest.fixture
def mock_logger():
    return MagicMock(spec=logging.Logger)


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def scheduler(clock):
    return CooperativeScheduler(clock=clock)


@pytest.fixture
def emissions():
    """List collecting every value passed to ``on_change``."""
    return []


@pytest.fixture
def sync(scheduler, emissions):
    return FilterSynchronizer(DEFAULT_FILTERS, on_change=emissions.append, scheduler=scheduler, debounce_ms=500)


@pytest.fixture
def file_payload():
    """One catalog entry as the backend returns it."""
    return {
        "uuid": "3f2a6c1e-9b7d-4d1e-8a55-0c2f9e7b1a11",
        "original_filename": "invoice-2024-03.pdf",
        "sha256_hash": "9f86d081884c7d659a2feaa0c55ad015a3bf4f1b2b0b822cd15d6c15b0f00a08",
        "file_size": 48213,
        "mime_type": "application/pdf",
        "upload_count": 3,
        "created_at": "2024-03-14T09:26:53Z",
        "last_accessed": "2024-03-20T12:00:00Z",
        "file": "/media/uploads/9f86d081.pdf",
    }


@pytest.fixture
def stats_payload():
    return {
        "total_uploads": 10,
        "unique_files": 7,
        "total_upload_size": 10240,
        "actual_storage_used": 7168,
        "storage_saved": 3072,
        "storage_saved_percentage": 30.0,
    }


@pytest.fixture
def file_record(file_payload):
    return FileRecord.from_dict(file_payload)


@pytest.fixture
def storage_stats(stats_payload):
    return StorageStats.from_dict(stats_payload)
