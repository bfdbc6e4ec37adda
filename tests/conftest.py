"""Pytest configuration and shared fixtures."""
import pytest

from hookbus.events import EventBus, EventRouter


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "property: hypothesis-driven property test")


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def router():
    return EventRouter()
