# app/core/dependencies.py

"""
Dependency injection entry points used by the routers.

- Database session per request (get_session).
- Current caller resolution and role checks, re-exported from app.core.security.

Tests substitute these through app.dependency_overrides.
"""

# flake8: noqa
from app.core.database import get_session
from app.core.security import (
    create_access_token,
    get_password_hash,
    verify_password,
    oauth2_scheme,
    get_token_subject,
    get_current_user_from_token,
    get_current_active_user,
    get_current_admin_user,
)
