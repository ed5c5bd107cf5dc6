"""
Validation utilities for exam file uploads.

Exams are uploaded as PDF documents or as photos/scans (JPEG, PNG).
"""
import logging
import re
from pathlib import Path
from typing import Tuple

from fastapi import UploadFile

from core.exceptions import FileTooLargeError, InvalidFileTypeError, UploadError

logger = logging.getLogger(__name__)

# Allowed MIME types and their extensions
ALLOWED_EXAM_TYPES = {
    "application/pdf": [".pdf"],
    "image/jpeg": [".jpg", ".jpeg"],
    "image/png": [".png"],
}
ALLOWED_EXTENSIONS = {ext for exts in ALLOWED_EXAM_TYPES.values() for ext in exts}

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def sanitize_filename(filename: str) -> str:
    """
    Reduce a client supplied filename to a safe basename.

    Directory components are dropped and every character outside
    ``[A-Za-z0-9._-]`` becomes ``_``.
    """
    name = Path(filename.replace("\\", "/")).name
    return _UNSAFE_FILENAME_CHARS.sub("_", name).lstrip(".") or "exam"


def validate_content_type(file: UploadFile) -> str:
    """
    Validate that the file has an allowed content type.

    Raises:
        InvalidFileTypeError: 415 if content type is missing or not allowed.
    """
    if not file.content_type or file.content_type not in ALLOWED_EXAM_TYPES:
        logger.error(f"Invalid content type: {file.content_type}")
        raise InvalidFileTypeError(
            f"Tipo de arquivo inválido. Tipos permitidos: {', '.join(ALLOWED_EXAM_TYPES.keys())}"
        )
    return file.content_type


def validate_file_extension(file: UploadFile, content_type: str) -> str:
    """
    Validate that the extension is allowed and matches the content type.

    Returns:
        str: The validated file extension (with leading dot).

    Raises:
        InvalidFileTypeError: 415 if extension is missing, invalid, or doesn't match content type.
    """
    file_extension = Path(file.filename).suffix.lower() if file.filename else ""

    if file_extension not in ALLOWED_EXTENSIONS:
        logger.error(f"Invalid file extension: {file_extension}")
        raise InvalidFileTypeError(
            f"Extensão de arquivo inválida. Extensões permitidas: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
        )

    if file_extension not in ALLOWED_EXAM_TYPES[content_type]:
        logger.error(f"File extension {file_extension} does not match content type {content_type}")
        raise InvalidFileTypeError("A extensão do arquivo não corresponde ao tipo informado")

    return file_extension


def validate_file_size(file_size: int, max_size: int) -> None:
    """
    Validate that the file size is within allowed limits.

    Raises:
        UploadError: 400 if file is empty.
        FileTooLargeError: 413 if it exceeds ``max_size``.
    """
    if file_size == 0:
        logger.error("Empty file uploaded")
        raise UploadError("O arquivo está vazio")

    if file_size > max_size:
        logger.error(f"File size {file_size} exceeds maximum {max_size}")
        raise FileTooLargeError(
            f"O arquivo excede o tamanho máximo de {max_size / (1024 * 1024):.1f}MB"
        )


def validate_upload_file(file: UploadFile) -> Tuple[str, str]:
    """
    Run the checks that do not need the file content.

    Size validation requires reading the upload, so the storage service
    runs it separately.

    Returns:
        Tuple[str, str]: (content_type, file_extension).
    """
    content_type = validate_content_type(file)
    file_extension = validate_file_extension(file, content_type)
    return content_type, file_extension
