"""
Service for storing exam files on disk.
"""
import logging
import uuid
from pathlib import Path

from fastapi import UploadFile

from core.config import UPLOAD_DIR, UPLOAD_MAX_SIZE
from services.validators import sanitize_filename, validate_file_size, validate_upload_file

logger = logging.getLogger(__name__)


class UploadService:
    """Stores uploaded exam files in the uploads directory and resolves them back."""

    def __init__(self, upload_dir: str = UPLOAD_DIR, max_size: int = UPLOAD_MAX_SIZE):
        """
        Initialize the upload service.

        Args:
            upload_dir: Directory where uploaded files will be stored
            max_size: Maximum allowed file size in bytes
        """
        self.upload_dir = Path(upload_dir)
        self.max_size = max_size
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    async def save_uploaded_file(self, file: UploadFile) -> str:
        """
        Validate ``file`` and write it to the uploads directory.

        The stored name is the sanitized original filename. When a file with
        that name already exists, a UUID prefix is added so earlier uploads
        are never overwritten.

        Returns:
            str: The stored filename (relative to the uploads directory).

        Raises:
            UploadError: If the file is empty, too large or of a disallowed type.
            OSError: If the file cannot be written.
        """
        validate_upload_file(file)

        file_content = await file.read()
        file_size = len(file_content)
        validate_file_size(file_size, self.max_size)

        stored_name = sanitize_filename(file.filename)
        upload_path = self.upload_dir / stored_name
        if upload_path.exists():
            stored_name = f"{uuid.uuid4().hex}-{stored_name}"
            upload_path = self.upload_dir / stored_name

        with open(upload_path, "wb") as f:
            f.write(file_content)
        logger.info(f"Stored exam file: {stored_name} (size: {file_size} bytes)")

        return stored_name

    def resolve(self, stored_name: str) -> Path:
        """
        Get the absolute path of a stored file.

        Raises:
            FileNotFoundError: If the name escapes the uploads directory or
                the file no longer exists.
        """
        base = self.upload_dir.resolve()
        path = (base / stored_name).resolve()
        if base not in path.parents or not path.is_file():
            raise FileNotFoundError(f"Stored exam file not found: {stored_name}")
        return path

    def discard(self, stored_name: str) -> None:
        """Remove a stored file, ignoring files that are already gone."""
        try:
            (self.upload_dir / stored_name).unlink()
            logger.info(f"Discarded exam file: {stored_name}")
        except FileNotFoundError:
            pass
