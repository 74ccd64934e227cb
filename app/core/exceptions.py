# app/core/exceptions.py

"""
Error taxonomy of the API.

Every class is an HTTPException so CRUD and security code can raise them the
same way they raise HTTPException, while main.py renders them uniformly as
{"error": message}.
"""

from typing import Dict, Optional

from fastapi import HTTPException, status


class AppError(HTTPException):
    """Base class: a short user-visible message bound to a fixed status code."""
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, headers: Optional[Dict[str, str]] = None):
        super().__init__(status_code=self.status_code, detail=message, headers=headers)
        self.message = message


class Unauthenticated(AppError):
    """Missing, malformed, expired or otherwise invalid credential."""
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(AppError):
    """Valid credential, insufficient role."""
    status_code = status.HTTP_403_FORBIDDEN


class InvalidInput(AppError):
    """Malformed or out-of-range input detected after schema validation."""
    status_code = status.HTTP_400_BAD_REQUEST


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class Conflict(AppError):
    """Uniqueness or referential-state violation."""
    status_code = status.HTTP_409_CONFLICT


class DependentRecordsExist(Conflict):
    """Delete refused because other records still reference the target."""
    status_code = status.HTTP_400_BAD_REQUEST


class Fatal(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class NameGenerationExhausted(Fatal):
    def __init__(self, attempts: int):
        super().__init__(f"Unable to generate unique product name after {attempts} attempts")
        self.attempts = attempts
