"""
Service layer for business logic.

This module contains all business logic and orchestration services.
"""
from services.exam_service import ExamService
from services.upload_service import UploadService
from services.user_surgery_service import UserSurgeryService
from services.user_surgery_view import UserSurgeryView

__all__ = [
    "ExamService",
    "UploadService",
    "UserSurgeryService",
    "UserSurgeryView",
]
