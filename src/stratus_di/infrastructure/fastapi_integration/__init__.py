"""
FastAPI integration module.

Provides helpers and utilities for integrating stratus-di with FastAPI.
"""

from .integration import container_lifespan, create_fastapi_dependency, create_named_dependency

__all__ = [
    "create_fastapi_dependency",
    "create_named_dependency",
    "container_lifespan",
]
