# app/core/__init__.py

"""
Core components shared by every domain of the Inventory API.

- `config.py`: settings loaded from the environment (pydantic-settings).
- `logging.py`: logging setup for the API process and the scripts.
- `database.py`: async engine, sessions and table creation (SQLModel).
- `exceptions.py`: the error classes rendered as {"error": message}.
- `crud_base.py`: generic async CRUD operations.
- `security.py`: password hashing, JWT tokens and role checks.
- `dependencies.py`: FastAPI dependencies used by the routers.
"""

__title__ = "Inventory API Core"
__description__ = "Core components for the Inventory API."
__version__ = "0.1.0"
__all__ = []
