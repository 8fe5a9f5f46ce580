"""
CLI Interface - Command-line tools for FlowScout.

Provides commands for:
- Catalog search and browsing
- Catalog statistics
"""

from .main import app, main

__all__ = ["app", "main"]
