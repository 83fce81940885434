"""
Logging module.

Adapts the container's leveled logger interface onto the standard library.
"""

from .logger import TRACE, StdlibLogger

__all__ = [
    "StdlibLogger",
    "TRACE",
]
