# app/__init__.py

"""
Inventory API application package.

The package holds the FastAPI entry point (main.py), the core subpackage with
shared configuration, database, security and error handling, and the domains
subpackage with one package per business domain.
"""

APP_NAME = "Inventory API"
APP_VERSION = "0.1.0"
API_PREFIX = "/api/v1"  # common prefix for every domain router (applied in main.py)

__version__ = APP_VERSION
__title__ = APP_NAME
__description__ = "Container and product inventory management API backend."
__all__ = []
