# file: tests/conftest.py

import pytest
from unittest.mock import MagicMock, patch

from core.event_dispatcher import EventDispatcher

# --- Mocks for Core Components ---

@pytest.fixture(scope="function")
def mock_service_locator():
    """Mocks the ServiceLocator and the services the executor resolves."""
    locator = MagicMock()

    # Mock ConfigLoader
    mock_config_loader = MagicMock()
    mock_config_loader.get_config.return_value = {}
    mock_config_loader.get.return_value = None

    # EventDispatcher is a MagicMock so tests can assert on publish calls
    mock_event_dispatcher = MagicMock(spec=EventDispatcher)

    # Configure resolve to return the correct mock
    def resolve_side_effect(service_name):
        if service_name == "config_loader":
            return mock_config_loader
        if service_name == "event_dispatcher":
            return mock_event_dispatcher
        raise KeyError(f"Service '{service_name}' not found.")

    locator.resolve.side_effect = resolve_side_effect

    # Make it easy to access and configure mocks
    locator.mock_config_loader = mock_config_loader
    locator.mock_event_dispatcher = mock_event_dispatcher

    return locator

@pytest.fixture
def temp_config_dir(tmp_path):
    """Creates a temporary directory for config files."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir

@pytest.fixture
def work_dir(tmp_path):
    """A scratch directory the file commands operate in."""
    directory = tmp_path / "work"
    directory.mkdir()
    return directory

# --- Global Mock for psutil.Process ---
# This ensures that MemoryLogFilter uses a mock process during tests,
# preventing actual system calls.
class MockProcess:
    def memory_info(self):
        return MagicMock(rss=100 * 1024 * 1024) # Default 100MB RSS

mock_psutil_process = MockProcess()

@pytest.fixture(scope="session", autouse=True)
def mock_psutil_process_globally():
    """Globally patches psutil.Process for all tests."""
    with patch('psutil.Process', return_value=mock_psutil_process):
        yield
