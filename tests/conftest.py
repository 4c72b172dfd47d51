"""
Shared test fixtures
"""
import os
import shutil
import tempfile

import pytest

# Keep the module-level app in clinic.main away from the working directory
SESSION_DATA_DIR = None
if "CLINIC_DATA_DIR" not in os.environ:
    SESSION_DATA_DIR = tempfile.mkdtemp(prefix="clinic-test-data-")
    os.environ["CLINIC_DATA_DIR"] = SESSION_DATA_DIR

from clinic.database.store import RecordStore


@pytest.fixture(scope="session", autouse=True)
def session_data_dir():
    """Remove the data directory created for the module-level app"""
    yield SESSION_DATA_DIR
    if SESSION_DATA_DIR:
        shutil.rmtree(SESSION_DATA_DIR, ignore_errors=True)


@pytest.fixture
def temp_data_dir():
    """Create temporary data directory for tests"""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    # Cleanup
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def store(temp_data_dir):
    """Fresh record store with the seeded doctor roster"""
    return RecordStore(temp_data_dir)
