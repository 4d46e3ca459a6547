"""
Command-line interface for the procload package.
"""

from .main import main_cli

__all__ = [
    "main_cli",
]
