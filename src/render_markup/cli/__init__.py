"""Command-line interface module for Render Markup.

This module provides the ``render-markup`` tool, which compiles markup files
into JSON render trees using renderers loaded from plugin modules.
"""

from .main import main

__all__ = ["main"]
