"""
Input document loading for the procload package.
"""

from .loader import load_document, parse_document

__all__ = [
    "load_document",
    "parse_document",
]
