"""
Storage Test Configuration and Fixtures

This file contains pytest fixtures shared across storage tests.

To use pytest:
    pip install -e ".[test]"
    pytest tests/storage/
"""

import tempfile
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from storage import MediaType, StorageConfig, StorageController
from storage.implementations.local_storage import LocalStorage
from storage.implementations.mock_storage import MockStorage
from storage.models.media_item import MediaItem


# =============================================================================
# CLOCK
# =============================================================================

class StepClock:
    """
    Deterministic clock: every call returns a later time.

    step=timedelta(0) freezes the clock, which is how tests exercise two
    writes landing on the same tick.
    """

    def __init__(self, start: datetime = datetime(2025, 1, 15, 14, 30), step=timedelta(seconds=1)):
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + self.step
        return current


@pytest.fixture
def clock():
    """Clock that advances one second per reading"""
    return StepClock()


# =============================================================================
# STORAGE FIXTURES
# =============================================================================

@pytest.fixture
def mock_storage(clock):
    """
    Provide a fresh, opened MockStorage instance for each test.

    Usage:
        def test_something(mock_storage):
            session = mock_storage.create_session("S1")
    """
    storage = MockStorage(clock=clock)
    storage.initialize()
    yield storage
    storage.cleanup()


@pytest.fixture
def temp_storage_dir():
    """
    Provide a temporary directory for storage tests.

    Automatically cleaned up after test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def local_storage_config(temp_storage_dir):
    """
    Provide a StorageConfig pointing into the temp directory.

    The YAML path does not exist, so only defaults apply.
    """
    config = StorageConfig(config_path=temp_storage_dir / "storage.yaml")
    config.set("storage_base_path", str(temp_storage_dir / "data"), save=False)
    return config


@pytest.fixture
def local_storage(local_storage_config, clock):
    """
    Provide an opened LocalStorage backed by a temp SQLite file.
    """
    storage = LocalStorage(local_storage_config, clock=clock)
    storage.initialize()
    yield storage
    storage.cleanup()


@pytest.fixture(params=["mock", "local"])
def store(request):
    """
    Run a test against both storage implementations.

    Usage:
        def test_contract(store):
            session = store.create_session("S1")
    """
    return request.getfixturevalue(f"{request.param}_storage")


# =============================================================================
# CONTROLLER FIXTURES
# =============================================================================

@pytest.fixture
def storage_controller(mock_storage, clock):
    """
    Provide StorageController with mock storage.
    """
    controller = StorageController(storage_impl=mock_storage, clock=clock)
    yield controller
    controller.cleanup()


# =============================================================================
# HELPER FIXTURES
# =============================================================================

@pytest.fixture
def make_video():
    """
    Build unsaved video items.

    Usage:
        def test_add(store, make_video):
            store.add_media_item(make_video(session.id, "v0", 5.0))
    """
    def _make(session_id: str, media_id: str, duration=5.0, **fields) -> MediaItem:
        return MediaItem(
            id=media_id,
            session_id=session_id,
            media_type=MediaType.VIDEO,
            payload=f"payload-{media_id}".encode(),
            created_at=fields.pop("created_at", datetime(2025, 1, 15, 14, 0)),
            duration=duration,
            **fields,
        )

    return _make


@pytest.fixture
def scenario_session(store, make_video):
    """
    Session "S1" holding three untrimmed videos (5.0s, 3.0s, 4.0s).

    Returns:
        (store, session_id, [id0, id1, id2])
    """
    session = store.create_session("S1")
    ids = ["id0", "id1", "id2"]
    for media_id, duration in zip(ids, [5.0, 3.0, 4.0]):
        store.add_media_item(make_video(session.id, media_id, duration))
    return store, session.id, ids


@pytest.fixture
def event_tracker():
    """
    Provide a helper for tracking event callbacks.

    Usage:
        def test_events(storage_controller, event_tracker):
            storage_controller.on_storage_error = event_tracker.track
            # ... trigger event ...
            assert event_tracker.was_called()
    """
    class EventTracker:
        def __init__(self):
            self.calls = []
            self.call_args = []

        def track(self, *args, **kwargs):
            """Record an event invocation"""
            self.calls.append({'args': args, 'kwargs': kwargs})
            if args:
                self.call_args.append(args[0])

        def was_called(self) -> bool:
            """Check if event was triggered"""
            return len(self.calls) > 0

        def get_call_count(self) -> int:
            """Get number of times event was triggered"""
            return len(self.calls)

        def get_last_call(self):
            """Get arguments from last call"""
            return self.calls[-1] if self.calls else None

        def reset(self):
            """Clear call history"""
            self.calls.clear()
            self.call_args.clear()

    return EventTracker()


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Full integration tests")
