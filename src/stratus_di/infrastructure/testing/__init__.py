"""
Testing utilities module.

Provides helpers and utilities for testing applications using stratus-di.
"""

from .utilities import RecordingLogger, TestContainer, create_mock_container

__all__ = [
    "TestContainer",
    "create_mock_container",
    "RecordingLogger",
]
