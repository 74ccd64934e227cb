# app/core/config.py

from typing import Any, List, Optional
from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict
import os

# Project root (two levels above app/core)
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


class Settings(BaseSettings):
    """
    Application settings, loaded from environment variables and the project .env file.
    """

    # --- Pydantic Settings ---
    model_config = SettingsConfigDict(
        env_file=os.path.join(BASE_DIR, '.env'),
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=True
    )

    # --- Application ---
    APP_NAME: str = "Inventory API"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "Container and product inventory management API"
    APP_ENV: str = Field("development", description="Application environment (development, production, testing)")
    DEBUG_MODE: bool = Field(False, description="Echo SQL and log at DEBUG level")
    LOG_LEVEL: str = Field("INFO", description="Root log level")
    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["*"], description="Allowed CORS origins")

    # --- Database ---
    DATABASE_URL: SecretStr = Field(..., description="Async SQLAlchemy database URL (postgresql+asyncpg or sqlite+aiosqlite)")

    # --- JWT ---
    SECRET_KEY: SecretStr = Field(..., description="Secret key for JWT token signing. Keep this highly secure!")
    ALGORITHM: str = Field("HS256", description="Algorithm used for JWT signing")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(60, description="Access token expiration time in minutes")

    # --- Inventory rules ---
    PRODUCT_NAME_MAX_ATTEMPTS: int = Field(10, ge=1, description="Draws allowed when generating a free product display name")
    LOW_STOCK_THRESHOLD: int = Field(10, ge=0, description="Default quantity below which a product counts as low stock")

    # --- Image storage (Cloudinary signed uploads) ---
    CLOUDINARY_CLOUD_NAME: Optional[str] = None
    CLOUDINARY_API_KEY: Optional[str] = None
    CLOUDINARY_API_SECRET: Optional[SecretStr] = None
    IMAGE_MAX_BYTES: int = Field(5 * 1024 * 1024, description="Largest image accepted for a signed upload")

    def model_post_init(self, __context: Any) -> None:  # noqa: ANN001
        if self.APP_ENV == "development" and self.DEBUG_MODE:
            self.LOG_LEVEL = "DEBUG"

    @property
    def cloudinary_configured(self) -> bool:
        return bool(self.CLOUDINARY_CLOUD_NAME and self.CLOUDINARY_API_KEY and self.CLOUDINARY_API_SECRET)


settings = Settings()
