"""
Pytest configuration for ConfigVault tests.

Registers custom markers used across test suites.
"""

import pytest


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
