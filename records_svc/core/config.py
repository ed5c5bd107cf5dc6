"""
Configuration module for the Medical Records Service.
Uses Pydantic BaseSettings for validation - app fails fast if required config is missing.
"""
import logging
from pathlib import Path

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings with validation.
    Required fields will cause the app to fail fast if not provided.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database Configuration
    records_svc_db_dir: str = Field(default="data", description="Database directory")
    records_svc_db_file: str = Field(default="medical_records.db", description="Database filename")
    records_svc_db_busy_timeout: int = Field(default=5000, description="SQLite busy timeout in milliseconds")

    # API Configuration
    records_svc_host: str = Field(default="0.0.0.0", description="API host")
    records_svc_port: int = Field(default=8000, description="API port")
    records_svc_reload: bool = Field(default=False, description="Enable hot reload")

    # Upload Configuration
    records_svc_upload_dir: str = Field(default="uploads", description="Directory where exam files are stored")
    records_svc_upload_max_size: int = Field(default=10485760, description="Max upload size in bytes (10MB)")

    # Authentication Configuration
    records_svc_jwt_secret: str = Field(
        ...,  # Required - no default means fail fast if missing
        description="Secret used to verify bearer tokens",
        min_length=32,
    )
    records_svc_jwt_algorithm: str = Field(default="HS256", description="Bearer token signing algorithm")

    # Authorization Configuration
    records_svc_enforce_exam_list_ownership: bool = Field(
        default=False,
        description="Reject exam listings for users other than the caller",
    )

    @model_validator(mode="after")
    def warn_on_open_exam_listing(self) -> "Settings":
        """Log a startup warning while the exam listing guard is disabled."""
        if not self.records_svc_enforce_exam_list_ownership:
            logger.warning(
                "RECORDS_SVC_ENFORCE_EXAM_LIST_OWNERSHIP is disabled - "
                "any authenticated user can list another user's exams"
            )
        return self

    @property
    def database_path(self) -> str:
        """Get the full database path."""
        return str(Path(self.records_svc_db_dir) / self.records_svc_db_file)

    def ensure_directories(self) -> None:
        """Ensure required directories exist."""
        Path(self.records_svc_db_dir).mkdir(parents=True, exist_ok=True)
        Path(self.records_svc_upload_dir).mkdir(parents=True, exist_ok=True)


# Create global settings instance - fails fast if required config is missing
settings = Settings()

# Ensure directories exist on import
settings.ensure_directories()

DATABASE_PATH = settings.database_path
DATABASE_BUSY_TIMEOUT = settings.records_svc_db_busy_timeout

API_HOST = settings.records_svc_host
API_PORT = settings.records_svc_port
API_RELOAD = settings.records_svc_reload

UPLOAD_DIR = settings.records_svc_upload_dir
UPLOAD_MAX_SIZE = settings.records_svc_upload_max_size

JWT_SECRET = settings.records_svc_jwt_secret
JWT_ALGORITHM = settings.records_svc_jwt_algorithm
