"""
Repository layer for database access.

This module contains all database access operations, encapsulating SQL and data persistence logic.
"""
from repositories.base import Database
from repositories.user_repository import UserRepository
from repositories.exam_repository import ExamRepository
from repositories.surgery_repository import SurgeryRepository
from repositories.disease_repository import DiseaseRepository
from repositories.hospitalization_repository import HospitalizationRepository
from repositories.user_surgery_repository import UserSurgeryRepository

__all__ = [
    "Database",
    "UserRepository",
    "ExamRepository",
    "SurgeryRepository",
    "DiseaseRepository",
    "HospitalizationRepository",
    "UserSurgeryRepository",
]
