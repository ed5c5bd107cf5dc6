"""
Service layer for exam operations.

Architecture:
    API Layer (routers) → ExamService → ExamRepository → Database
                                      → UploadService  → uploads directory

Dependency Injection:
    ExamService receives its collaborators via constructor injection.
    Use core.dependencies.get_exam_service() in routers with Depends().
"""
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from fastapi import UploadFile

from core.exceptions import AccessDeniedError
from core.validation import validate_payload
from repositories import ExamRepository, UserRepository
from schemas import ExamCreate, ExamDownloadParams, ExamListParams, ExamResponse
from services.upload_service import UploadService

logger = logging.getLogger(__name__)

EXAM_NOT_FOUND_MESSAGE = "Exame não encontrado"
FILE_ACCESS_DENIED_MESSAGE = "você não tem acesso a este arquivo"
LIST_ACCESS_DENIED_MESSAGE = "você não possui acesso a essas informações"


class ExamService:
    """
    Service layer for exam operations.

    Handles validation, ownership checks and coordination between the exam
    repository and the file storage.
    """

    def __init__(
        self,
        exam_repository: ExamRepository,
        user_repository: UserRepository,
        upload_service: UploadService,
        enforce_list_ownership: bool = False
    ):
        """
        Initialize the exam service.

        Args:
            exam_repository: ExamRepository instance for data access.
            user_repository: Registers the exam owner on first upload.
            upload_service: UploadService instance for file storage.
            enforce_list_ownership: Reject listing another user's exams.
        """
        self._repo = exam_repository
        self._users = user_repository
        self._uploads = upload_service
        self._enforce_list_ownership = enforce_list_ownership

    def list_exams(self, user_id: str, caller_id: str) -> List[ExamResponse]:
        """
        List every exam owned by ``user_id``.

        Raises:
            RequestValidationFailed: If ``user_id`` is not a UUID.
            AccessDeniedError: If the ownership guard is enabled and
                ``user_id`` is not the caller.
        """
        params = validate_payload(ExamListParams, {"userId": user_id})

        if self._enforce_list_ownership and params.user_id != caller_id:
            raise AccessDeniedError(LIST_ACCESS_DENIED_MESSAGE)

        exams = self._repo.list_by_user(params.user_id)
        return [ExamResponse.model_validate(exam) for exam in exams]

    async def save_exam(
        self,
        name: Optional[str],
        user_id: Optional[str],
        file: Optional[UploadFile]
    ) -> ExamResponse:
        """
        Store the uploaded file and create the exam that references it.

        Every field, the file included, is validated before anything is
        written. If the database insert fails the stored file is removed.

        Raises:
            RequestValidationFailed: If any field is missing or invalid.
            UploadError: If the file type or size is not accepted.
        """
        data = {
            "name": name,
            "userId": user_id,
            "path": file.filename if file is not None else None,
        }
        payload = validate_payload(ExamCreate, data)

        stored_name = await self._uploads.save_uploaded_file(file)
        try:
            self._users.ensure(payload.user_id)
            exam = self._repo.add(
                name=payload.name,
                user_id=payload.user_id,
                path=stored_name,
            )
        except Exception:
            self._uploads.discard(stored_name)
            raise

        logger.info(
            "Exam saved",
            extra={"exam_id": exam["id"], "user_id": exam["user_id"]}
        )
        return ExamResponse.model_validate(exam)

    def get_download(self, exam_id: Optional[str], caller_id: str) -> Union[Path, Dict[str, Any]]:
        """
        Resolve the file of an exam owned by the caller.

        Returns:
            The file path, or a ``{"message": ...}`` body when the exam does
            not exist (answered with status 200).

        Raises:
            RequestValidationFailed: If ``exam_id`` is not a UUID.
            AccessDeniedError: If the exam belongs to another user.
            FileNotFoundError: If the stored file is missing from disk.
        """
        params = validate_payload(ExamDownloadParams, {"id": exam_id})

        exam = self._repo.get_by_id(params.id)
        if exam is None:
            logger.info(f"Exam not found: {params.id}")
            return {"message": EXAM_NOT_FOUND_MESSAGE}

        if exam["user_id"] != caller_id:
            raise AccessDeniedError(FILE_ACCESS_DENIED_MESSAGE, exam_id=params.id)

        return self._uploads.resolve(exam["path"])
