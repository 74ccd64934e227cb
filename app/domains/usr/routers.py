# app/domains/usr/routers.py

"""
API endpoints of the 'usr' domain: sign-in and account management.
"""

from typing import List
from datetime import timedelta

from fastapi import APIRouter, Depends, status, Query
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.config import settings
from app.core.database import get_session
from app.core import dependencies as deps
from app.core.exceptions import Forbidden, NotFound, Unauthenticated

from . import crud as usr_crud
from . import models as usr_models
from . import schemas as usr_schemas


router = APIRouter(
    tags=["Users"],
    responses={404: {"description": "Not found"}},
)


# =============================================================================
# 1. Authentication
# =============================================================================

@router.post("/auth/token", response_model=usr_schemas.Token, summary="Obtain an access token")
async def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_session),
):
    """OAuth2 password flow; the form's username field carries the email."""
    user = await usr_crud.user.authenticate(db, email=form_data.username, password=form_data.password)
    if not user:
        raise Unauthenticated("Incorrect email or password")
    if not user.is_active:
        raise Forbidden("Inactive user")

    access_token_expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = deps.create_access_token(data={"sub": user.uid}, expires_delta=access_token_expires)
    return {"access_token": access_token, "token_type": "bearer"}


@router.get("/auth/me", response_model=usr_schemas.UserRead, summary="Current account")
async def read_users_me(current_user: usr_models.User = Depends(deps.get_current_active_user)):
    return current_user


# =============================================================================
# 2. Accounts
# =============================================================================
@router.post("/users", response_model=usr_schemas.UserCreated, status_code=status.HTTP_201_CREATED, summary="Create a staff or admin account")
async def create_user(
    user_in: usr_schemas.UserCreate,
    db: AsyncSession = Depends(get_session),
    current_admin_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    db_user = await usr_crud.user.create(db, obj_in=user_in, created_by=current_admin_user.uid)
    return usr_schemas.UserCreated(uid=db_user.uid)


@router.get("/users", response_model=List[usr_schemas.UserRead], summary="List accounts ordered by email")
async def read_users(
    db: AsyncSession = Depends(get_session),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    current_admin_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    return await usr_crud.user.list_by_email(db, skip=skip, limit=limit)


@router.get("/users/{uid}", response_model=usr_schemas.UserRead, summary="Read one account")
async def read_user(
    uid: str,
    db: AsyncSession = Depends(get_session),
    current_user: usr_models.User = Depends(deps.get_current_active_user),
):
    """
    Admins may read any account; staff only their own.
    """
    if not current_user.is_admin and uid != current_user.uid:
        raise Forbidden("Not enough permissions to view other user's information.")
    user = await usr_crud.user.get(db, uid)
    if not user:
        raise NotFound("User not found")
    return user


@router.delete("/users/{uid}", summary="Delete an account")
async def delete_user(
    uid: str,
    db: AsyncSession = Depends(get_session),
    current_admin_user: usr_models.User = Depends(deps.get_current_admin_user),
):
    await usr_crud.user.remove(db, uid=uid, requested_by=current_admin_user.uid)
    return {"message": "User deleted successfully"}
