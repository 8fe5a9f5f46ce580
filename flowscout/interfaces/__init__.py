"""
Interfaces - Entry points into FlowScout.

- cli: Typer command-line interface
"""

__all__ = ["cli"]
