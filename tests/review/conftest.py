"""
Review Test Configuration and Fixtures
"""

import tempfile
from pathlib import Path

import pytest

from review.flag_workflow import FlagWorkflow
from review.preferences import MemoryPreferences
from storage.config import StorageConfig
from storage.controllers.storage_controller import StorageController
from storage.implementations.mock_storage import MockStorage


@pytest.fixture
def mock_storage():
    """Opened in-memory store"""
    storage = MockStorage()
    storage.initialize()
    yield storage
    storage.cleanup()


@pytest.fixture
def storage_controller(mock_storage):
    controller = StorageController(storage_impl=mock_storage)
    yield controller
    controller.cleanup()


@pytest.fixture
def session_id(storage_controller):
    return storage_controller.create_session("Review").id


@pytest.fixture
def preferences():
    """Preferences with the flag prompt enabled"""
    return MemoryPreferences(suppress_flag_prompt=False)


@pytest.fixture
def storage_config(temp_dir):
    """StorageConfig with no override file (settings defaults)"""
    return StorageConfig(config_path=temp_dir / "storage.yaml")


@pytest.fixture
def workflow(session_id, storage_controller, preferences, storage_config):
    """
    FlagWorkflow with every callback recorded in workflow.events.

    Usage:
        def test_prompt(workflow):
            workflow.finish(capture)
            assert workflow.events == ["prompt"]
    """
    workflow = FlagWorkflow(session_id, storage_controller, preferences, storage_config)
    workflow.events = []
    workflow.on_prompt = lambda: workflow.events.append("prompt")
    workflow.on_navigate_to_editor = (
        lambda media_id: workflow.events.append(("navigate", media_id))
    )
    return workflow


@pytest.fixture
def temp_dir():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Full integration tests")
