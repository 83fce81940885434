"""
Metadata cache module.

Persists discovered component names so a later start can skip scanning.
"""

from .file_cache import DEFAULT_CACHE_PATH, FileMetadataCache

__all__ = [
    "FileMetadataCache",
    "DEFAULT_CACHE_PATH",
]
