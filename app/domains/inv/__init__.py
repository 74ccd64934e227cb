# app/domains/inv/__init__.py

"""
The 'inv' domain: containers (shipment batches) and the products received in
them, including the spreadsheet bulk import.

- `models.py`: the containers and products tables.
- `schemas.py`: request/response models (camelCase JSON).
- `crud.py`: registrars enforcing code/SKU uniqueness, container references
  and all-or-nothing imports.
- `routers.py`: the /inv endpoints.
"""

__all__ = []
