"""
Pydantic schemas for API request/response validation.

This module contains all Pydantic models used at API boundaries.
"""
from schemas.exam import ExamCreate, ExamDownloadParams, ExamListParams, ExamResponse
from schemas.user_surgery import (
    HospitalizationInput,
    HospitalizationSummary,
    StrictHospitalizationInput,
    SurgerySummary,
    UserSurgeryCreate,
    UserSurgeryIdList,
    UserSurgeryIdParam,
    UserSurgeryListItem,
    UserSurgeryResponse,
    UserSurgeryUpdate,
)

__all__ = [
    # Exam schemas
    "ExamCreate",
    "ExamDownloadParams",
    "ExamListParams",
    "ExamResponse",
    # User surgery schemas
    "HospitalizationInput",
    "HospitalizationSummary",
    "StrictHospitalizationInput",
    "SurgerySummary",
    "UserSurgeryCreate",
    "UserSurgeryIdList",
    "UserSurgeryIdParam",
    "UserSurgeryListItem",
    "UserSurgeryResponse",
    "UserSurgeryUpdate",
]
