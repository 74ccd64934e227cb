# app/domains/shared/__init__.py

"""
The 'shared' domain: services used across the inventory screens, currently
the signing of direct-to-storage image uploads (Cloudinary).

- `schemas.py`: the signature response.
- `services.py`: upload checks and request signing.
- `routers.py`: the /shared endpoints.
"""

__all__ = []
