"""
Version information for replbook.

This module provides the single source of truth for version information.
Update both __version__ and __release_date__ when releasing new versions.
"""

__version__ = "0.2.0"
__version_info__ = tuple(map(int, __version__.split(".")))
__release_date__ = "Oct 18, 2026"

# Additional version metadata
__description__ = "Notebook view over REPL source files: split, join and execute cells"
