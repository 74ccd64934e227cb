# tests/domains/__init__.py

"""
Integration tests grouped by business domain.
"""

__all__ = []
