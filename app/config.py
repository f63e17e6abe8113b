from pydantic_settings import BaseSettings
from pydantic import ConfigDict, field_validator


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./listings.db"

    # JWT
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Bootstrap admin account
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "admin123"

    # Uploads
    UPLOAD_PATH: str = "./uploads"
    MAX_FILE_SIZE: int = 10 * 1024 * 1024
    ALLOWED_FILE_TYPES: str = "jpg,jpeg,png,gif,webp,mp4,mov,avi"

    CATEGORIES_CACHE_TTL_SECONDS: int = 10 * 60

    FRONTEND_URL: str = "*"
    LOG_LEVEL: str = "INFO"

    @field_validator("ALLOWED_FILE_TYPES", mode="before")
    @classmethod
    def normalize_file_types(cls, v):
        """Lowercase the comma separated extension list and drop leading dots."""
        if isinstance(v, (list, tuple, set)):
            v = ",".join(v)
        return ",".join(
            part.strip().lstrip(".").lower() for part in v.split(",") if part.strip()
        )

    @property
    def allowed_extensions(self) -> set[str]:
        return set(self.ALLOWED_FILE_TYPES.split(","))

    model_config = ConfigDict(env_file=".env", extra="ignore")


settings = Settings()
