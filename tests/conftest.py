"""Pytest configuration and fixtures."""

import os

import pytest

# Set before test modules import pbl_dashboard, which reads settings when creating loggers
os.environ["PBL_ENV"] = "test"
os.environ["OPENAI_API_KEY"] = "test-openai-key"
os.environ.pop("AIRTABLE_API_KEY", None)
os.environ.pop("AIRTABLE_BASE_ID", None)


@pytest.fixture(scope="session", autouse=True)
def setup_test_env(tmp_path_factory):
    """Set up test environment variables."""
    from pbl_dashboard.core.config import get_settings
    from pbl_dashboard.db.datastore import get_datastore

    os.environ["DATA_DIR"] = str(tmp_path_factory.mktemp("data"))
    get_settings.cache_clear()
    get_datastore.cache_clear()
