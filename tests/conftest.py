"""Global configuration and fixtures for all pytest-based tests"""

import pytest
from prometheus_client import CollectorRegistry


@pytest.fixture(name="registry")
def fixture_registry():
    """A fresh metrics registry, so that metric values do not leak between tests"""
    return CollectorRegistry()
