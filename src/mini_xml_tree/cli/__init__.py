"""Command-line interface module for Mini XML Tree.

This module provides the ``mini-xml-tree`` tool for parsing XML files to JSON,
re-formatting them and checking that they are well formed.
"""

from .main import main

__all__ = ["main"]
