# app/domains/shared/routers.py

"""
API endpoints of the 'shared' domain.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.core import dependencies as deps
from app.domains.usr import models as usr_models

from . import schemas as shared_schemas
from . import services as shared_services


router = APIRouter(
    tags=["Shared"],
    responses={404: {"description": "Not found"}},
)


@router.get("/images/signature", response_model=shared_schemas.UploadSignature)
async def sign_image_upload(
    folder: str = Query("products", max_length=100),
    content_type: Optional[str] = Query(None, alias="contentType"),
    size: Optional[int] = Query(None),
    current_user: usr_models.User = Depends(deps.get_current_active_user),
):
    """
    Signs a direct image upload for a signed-in user. contentType and size,
    when given, are checked before signing.
    """
    return shared_services.sign_upload(folder=folder, content_type=content_type, size=size)
