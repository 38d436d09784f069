import os

# Settings are read at import time; provide credentials before app modules load
os.environ.setdefault("POSTGRES_USER", "test")
os.environ.setdefault("POSTGRES_PASSWORD", "test")

import pytest
from unittest.mock import AsyncMock, MagicMock

@pytest.fixture
def mock_session():
    session = AsyncMock()

    # Setup execute result
    mock_result = MagicMock()
    # Ensure scalar_one_or_none returns a value, not a coroutine
    mock_result.scalar_one_or_none.return_value = None
    mock_result.scalars.return_value.all.return_value = []
    mock_result.scalars.return_value.first.return_value = None

    # Configure session.execute to return this result when awaited
    session.execute.side_effect = None
    session.execute.return_value = mock_result

    # Configure session.get to return None by default
    session.get.return_value = None

    # Standard methods
    session.add = MagicMock()
    session.refresh = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.delete = AsyncMock()

    # begin_nested() is used as an async context manager (savepoint)
    session.begin_nested = MagicMock()
    session.begin_nested.return_value.__aenter__.return_value = session
    session.begin_nested.return_value.__aexit__.return_value = False

    return session

@pytest.fixture
def mock_async_session_local(mock_session, monkeypatch):
    """Mock AsyncSessionLocal to return a mock session context manager."""
    mock_factory = MagicMock()
    # Mock the context manager __aenter__ / __aexit__
    mock_factory.return_value.__aenter__.return_value = mock_session
    mock_factory.return_value.__aexit__.return_value = False

    # Patch in all files that use AsyncSessionLocal
    targets = [
        "app.services.local_scheduler.AsyncSessionLocal",
        "app.services.auth_observer.AsyncSessionLocal",
        "app.api.notifications.AsyncSessionLocal",
    ]
    for target in targets:
        try:
            monkeypatch.setattr(target, mock_factory)
        except (AttributeError, ImportError):
            pass

    return mock_factory

@pytest.fixture(autouse=True)
def auto_mock_db(mock_async_session_local):
    """Automatically use mock_async_session_local for all tests."""
    return mock_async_session_local

@pytest.fixture
def mock_scheduler(monkeypatch):
    """Mock the global scheduler object in app.core.scheduler"""
    scheduler_mock = MagicMock()
    scheduler_mock.add_job = MagicMock()
    scheduler_mock.remove_job = MagicMock()
    scheduler_mock.get_jobs = MagicMock(return_value=[])

    monkeypatch.setattr("app.core.scheduler.scheduler", scheduler_mock)

    return scheduler_mock

@pytest.fixture(autouse=True)
def reset_handler():
    """Each test starts without a registered notification handler."""
    from app.core.notification_handler import reset_notification_handler
    reset_notification_handler()
    yield
    reset_notification_handler()
