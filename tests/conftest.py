"""
Pytest configuration and fixtures for testing
"""

import pytest

from swipematch.core.config import settings
from swipematch.services import set_profile_store
from swipematch.services.profile_store import InMemoryProfileStore
from tests.test_utils import FailingProfileStore


@pytest.fixture(autouse=True)
def reset_profile_store():
    """Never leak the process-wide store between tests"""
    set_profile_store(None)
    yield
    set_profile_store(None)


@pytest.fixture
def matching_settings(monkeypatch):
    """Default matching configuration, adjustable per test"""
    monkeypatch.setattr(settings, "MATCH_APPROVAL_THRESHOLD", 0.5)
    monkeypatch.setattr(settings, "CLAMP_APPROVAL_RATE", True)
    monkeypatch.setattr(settings, "TRANSACTIONAL_MATCH_WRITES", False)
    monkeypatch.setattr(settings, "INDEXED_CANDIDATE_QUERY", False)
    return settings


@pytest.fixture
def store(matching_settings):
    """Empty in-memory profile store"""
    return InMemoryProfileStore()


@pytest.fixture
def failing_store(matching_settings):
    """In-memory profile store with failure injection"""
    return FailingProfileStore()
