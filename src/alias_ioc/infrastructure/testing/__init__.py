"""
Testing utilities module.

Provides helpers for testing applications wired with alias-ioc.
"""

from .utilities import TestContainer, create_mock_container

__all__ = [
    "TestContainer",
    "create_mock_container",
]
