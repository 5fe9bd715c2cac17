"""
Top-level package for commit_organizer.

This package exposes the main CLI entry point via the
``commit_organizer.cli`` module and the pipeline via
``commit_organizer.organizer``.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
