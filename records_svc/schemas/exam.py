"""
Pydantic schemas for exam-related API operations.
"""
from typing import ClassVar, Dict

from pydantic import Field

from schemas.common import RequestSchema, RequiredStr, ResponseSchema, UuidStr


class ExamListParams(RequestSchema):
    """Path parameters of the exam listing."""

    error_messages: ClassVar[Dict[str, str]] = {
        "userId": "Informe o id do usuario",
    }

    user_id: UuidStr


class ExamCreate(RequestSchema):
    """Schema for saving an exam.

    ``path`` is the name of the uploaded file; it is only known once the
    multipart upload has been received.
    """

    error_messages: ClassVar[Dict[str, str]] = {
        "name": "Informe um nome para o exame",
        "userId": "Informe o ID do usuario para salvar o exame",
        "path": "Informe o arquivo que deseja salvar",
    }

    name: RequiredStr
    user_id: UuidStr
    path: RequiredStr


class ExamDownloadParams(RequestSchema):
    """Query parameters of the exam download."""

    error_messages: ClassVar[Dict[str, str]] = {
        "id": "Informe o id do usuario",
    }

    id: UuidStr


class ExamResponse(ResponseSchema):
    """Schema for an exam record."""

    id: str = Field(..., description="Exam id", examples=["0b9f6a4e-7d1c-4c1e-9c55-3f1f0a2b7c11"])
    name: str = Field(..., description="Exam name", examples=["Blood Test"])
    user_id: str = Field(..., description="Owner id")
    path: str = Field(..., description="Stored filename", examples=["report.pdf"])
