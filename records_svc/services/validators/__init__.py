"""
Validation utilities for services.
"""
from services.validators.upload_validator import (
    validate_upload_file,
    validate_file_size,
    validate_content_type,
    validate_file_extension,
    sanitize_filename,
    ALLOWED_EXAM_TYPES,
    ALLOWED_EXTENSIONS,
)

__all__ = [
    "validate_upload_file",
    "validate_file_size",
    "validate_content_type",
    "validate_file_extension",
    "sanitize_filename",
    "ALLOWED_EXAM_TYPES",
    "ALLOWED_EXTENSIONS",
]
