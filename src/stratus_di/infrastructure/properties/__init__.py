"""
Properties module.

Reads ``.properties`` files into the flat configuration map.
"""

from .loader import load_properties, parse_properties

__all__ = [
    "load_properties",
    "parse_properties",
]
