"""
CLI module for MovIQ.

Provides terminal views for:
- The home feed (trending + recommended)
- Movie details with recommendations
- Search and genre/category discovery
- Favorites management
"""

from .app import cli, main

__all__ = ["cli", "main"]
