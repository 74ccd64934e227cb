# tests/__init__.py

"""
Test suite of the Inventory API.

- `conftest.py`: database, user and client fixtures.
- `domains/`: integration tests per business domain (usr, inv, shared).
"""

__title__ = "Inventory API Tests"
__all__ = []
