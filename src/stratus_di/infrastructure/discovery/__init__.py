"""
Discovery module.

Finds declared components by importing packages and their submodules.
"""

from .scanner import PackageScanner

__all__ = [
    "PackageScanner",
]
