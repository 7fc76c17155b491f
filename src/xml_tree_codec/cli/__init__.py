"""Command-line interface module for the XML tree codec.

This module provides the ``xml-tree-codec`` tool for parsing XML files into
JSON trees, composing JSON trees back into XML, and validating documents.
"""

from .main import main

__all__ = ["main"]
