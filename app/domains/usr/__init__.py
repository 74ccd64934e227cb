# app/domains/usr/__init__.py

"""
The 'usr' domain: staff and admin accounts, sign-in, and the role that gates
every mutating inventory operation.

- `models.py`: the users table.
- `schemas.py`: request/response models.
- `crud.py`: registration, lookup, authentication and removal.
- `routers.py`: the /usr endpoints.
"""

__all__ = []
