"""
Exams router - exam listing, upload and download endpoints.

All endpoints require a bearer token; the caller's id comes from its
``sub`` claim.

Architecture:
    HTTP Request → Router (this file) → ExamService → ExamRepository → Database
                                                    → UploadService  → uploads directory

Error handling:
    Each endpoint hands failures to core.exceptions.handle_errors() together
    with its default message. Domain errors keep their status, anything
    unexpected becomes a 500 carrying that default message.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import FileResponse, JSONResponse

from core.auth import get_current_user_id
from core.dependencies import get_exam_service
from core.exceptions import handle_errors
from schemas import ExamResponse
from services import ExamService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/exams",
    tags=["Exams"],
)

LIST_ERROR_MESSAGE = "Erro ao tentar listar os exames"
SAVE_ERROR_MESSAGE = "Erro ao tentar salvar o exame"
DOWNLOAD_ERROR_MESSAGE = "Erro ao tentar baixar o exame"


# =============================================================================
# ENDPOINTS
# =============================================================================
# /download is declared before /{user_id} so it is not captured as a user id.

@router.get(
    "/download",
    summary="Download an exam file",
    description="Stream the file attached to an exam owned by the caller."
)
async def download_exam(
    exam_id: Optional[str] = Query(None, alias="id"),
    caller_id: str = Depends(get_current_user_id),
    exam_service: ExamService = Depends(get_exam_service)
):
    """
    Download the file of an exam.

    - **id**: Exam UUID

    Returns the file, or ``{"message": "Exame não encontrado"}`` with status
    200 when no exam has that id.

    Raises:
    - 400 Bad Request: If the id is missing or not a UUID
    - 401 Unauthorized: If the exam belongs to another user
    """
    try:
        result = exam_service.get_download(exam_id, caller_id)
        if isinstance(result, dict):
            return JSONResponse(status_code=200, content=result)
        return FileResponse(path=result, filename=result.name)
    except Exception as exc:
        return handle_errors(exc, DOWNLOAD_ERROR_MESSAGE)


@router.get(
    "/{user_id}",
    response_model=List[ExamResponse],
    summary="List a user's exams",
    description="Get every exam stored for the given user."
)
async def list_exams(
    user_id: str,
    caller_id: str = Depends(get_current_user_id),
    exam_service: ExamService = Depends(get_exam_service)
):
    """
    List exams for a user.

    - **user_id**: User UUID

    Raises:
    - 400 Bad Request: If the id is not a UUID
    """
    try:
        return exam_service.list_exams(user_id, caller_id)
    except Exception as exc:
        return handle_errors(exc, LIST_ERROR_MESSAGE)


@router.post(
    "",
    response_model=ExamResponse,
    status_code=201,
    summary="Upload an exam",
    description="Store an exam file (PDF, JPEG or PNG) and register it for a user."
)
async def save_exam(
    name: Optional[str] = Form(None),
    user_id: Optional[str] = Form(None, alias="userId"),
    file: Optional[UploadFile] = File(None),
    caller_id: str = Depends(get_current_user_id),
    exam_service: ExamService = Depends(get_exam_service)
):
    """
    Upload a new exam.

    - **name**: Exam name
    - **userId**: Owner UUID
    - **file**: The exam document

    Returns the created exam with the stored file name as ``path``.

    Raises:
    - 400 Bad Request: Missing fields, invalid id or empty file
    - 413 Request Entity Too Large: File above the configured limit
    - 415 Unsupported Media Type: File type not allowed
    """
    try:
        return await exam_service.save_exam(name, user_id, file)
    except Exception as exc:
        return handle_errors(exc, SAVE_ERROR_MESSAGE)
