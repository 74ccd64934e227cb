# app/domains/shared/schemas.py

"""
Response models of the 'shared' domain.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class UploadSignature(BaseModel):
    """Everything the browser needs to post an image straight to Cloudinary."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    signature: str
    timestamp: int
    api_key: str
    cloud_name: str
    folder: str
