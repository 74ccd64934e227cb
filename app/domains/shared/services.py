# app/domains/shared/services.py

"""
Signed image uploads.

The browser uploads image bytes directly to Cloudinary; the API only checks
the declared type and size and signs the upload parameters with the account
secret, which never leaves the server.
"""

import logging
import re
import time
from typing import Optional

import cloudinary.utils

from app.core.config import settings
from app.core.exceptions import Fatal, InvalidInput
from . import schemas

logger = logging.getLogger(__name__)

FOLDER_PATTERN = re.compile(r"^[A-Za-z0-9_-]+(/[A-Za-z0-9_-]+)*$")


def check_upload(*, folder: str, content_type: Optional[str], size: Optional[int]) -> None:
    """Rejects uploads that are not images or exceed IMAGE_MAX_BYTES."""
    if not FOLDER_PATTERN.match(folder):
        raise InvalidInput("Invalid upload folder")
    if content_type is not None and not content_type.lower().startswith("image/"):
        raise InvalidInput("Please select an image file (e.g., JPG, PNG)")
    if size is not None:
        if size <= 0:
            raise InvalidInput("Uploaded file is empty")
        if size > settings.IMAGE_MAX_BYTES:
            raise InvalidInput(f"Image size exceeds {settings.IMAGE_MAX_BYTES // (1024 * 1024)}MB limit")


def sign_upload(*, folder: str, content_type: Optional[str] = None, size: Optional[int] = None) -> schemas.UploadSignature:
    check_upload(folder=folder, content_type=content_type, size=size)
    if not settings.cloudinary_configured:
        logger.error("Cloudinary configuration missing (cloud name, api key or secret)")
        raise Fatal("Image storage configuration missing")

    timestamp = int(time.time())
    signature = cloudinary.utils.api_sign_request(
        {"timestamp": timestamp, "folder": folder},
        settings.CLOUDINARY_API_SECRET.get_secret_value(),
    )
    logger.debug("Signed upload for folder %s at %d", folder, timestamp)
    return schemas.UploadSignature(
        signature=signature,
        timestamp=timestamp,
        api_key=settings.CLOUDINARY_API_KEY,
        cloud_name=settings.CLOUDINARY_CLOUD_NAME,
        folder=folder,
    )
