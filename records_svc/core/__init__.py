"""
Core module for application configuration, logging, and shared utilities.

This module provides:
- Settings: Application configuration via pydantic-settings
- Dependency injection: FastAPI Depends() functions for services and repositories
- Exceptions: Domain-specific exception classes with HTTP status codes
- Authentication: Bearer token verification
- Datetime utilities: UTC-first datetime handling
"""
from core.config import settings, Settings

# Dependency injection - import functions for FastAPI Depends()
from core.dependencies import (
    get_database,
    get_exam_repository,
    get_surgery_repository,
    get_hospitalization_repository,
    get_user_surgery_repository,
    get_upload_service,
    get_exam_service,
    get_user_surgery_service,
    reset_database,
)

# Exception classes for consistent error handling
from core.exceptions import (
    RecordsServiceError,
    RequestValidationFailed,
    AuthenticationError,
    AccessDeniedError,
    UploadError,
    InvalidFileTypeError,
    FileTooLargeError,
    handle_errors,
    setup_exception_handlers,
)

# UTC datetime utilities
from core.datetime_utils import (
    to_utc,
    parse_datetime,
    parse_iso_strict,
    format_iso,
    to_db_string,
)

__all__ = [
    # Settings
    "settings",
    "Settings",
    # Dependency injection
    "get_database",
    "get_exam_repository",
    "get_surgery_repository",
    "get_hospitalization_repository",
    "get_user_surgery_repository",
    "get_upload_service",
    "get_exam_service",
    "get_user_surgery_service",
    "reset_database",
    # Exceptions
    "RecordsServiceError",
    "RequestValidationFailed",
    "AuthenticationError",
    "AccessDeniedError",
    "UploadError",
    "InvalidFileTypeError",
    "FileTooLargeError",
    "handle_errors",
    "setup_exception_handlers",
    # Datetime utilities
    "to_utc",
    "parse_datetime",
    "parse_iso_strict",
    "format_iso",
    "to_db_string",
]
