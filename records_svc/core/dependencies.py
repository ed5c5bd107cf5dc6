"""
FastAPI Dependency Injection configuration for the Medical Records Service.

Architecture Flow:
    API Layer (Routers)
         ↓ Depends()
    Service Layer (Business Logic)
         ↓ Injected
    Repository Layer (Data Access)
         ↓ Injected
    Database (SQLite Connection)

Usage in Routers:
    from core.dependencies import get_exam_service

    @router.get("/{user_id}")
    async def list_exams(
        user_id: str,
        exam_service: ExamService = Depends(get_exam_service)
    ):
        ...

Testing:
    # Override dependencies in tests
    app.dependency_overrides[get_database] = lambda: test_database
"""
import logging
from typing import Optional

from core.config import settings

logger = logging.getLogger(__name__)


# =============================================================================
# DATABASE DEPENDENCY
# =============================================================================

# Imported lazily to avoid circular imports with repositories
_database_instance: Optional["Database"] = None


def get_database() -> "Database":
    """
    Get the database instance (created once, then shared).

    Returns:
        Database: The configured database instance.
    """
    global _database_instance

    if _database_instance is None:
        from repositories.base import Database

        logger.info(f"Initializing database: {settings.database_path}")
        _database_instance = Database(
            db_path=settings.database_path,
            busy_timeout=settings.records_svc_db_busy_timeout
        )

    return _database_instance


def reset_database() -> None:
    """Forget the shared database instance (for testing only)."""
    global _database_instance
    _database_instance = None


# =============================================================================
# REPOSITORY DEPENDENCIES
# =============================================================================

def get_user_repository() -> "UserRepository":
    from repositories import UserRepository

    return UserRepository(db=get_database())


def get_exam_repository() -> "ExamRepository":
    from repositories import ExamRepository

    return ExamRepository(db=get_database())


def get_surgery_repository() -> "SurgeryRepository":
    from repositories import SurgeryRepository

    return SurgeryRepository(db=get_database())


def get_hospitalization_repository() -> "HospitalizationRepository":
    from repositories import HospitalizationRepository

    return HospitalizationRepository(db=get_database())


def get_user_surgery_repository() -> "UserSurgeryRepository":
    from repositories import UserSurgeryRepository

    return UserSurgeryRepository(db=get_database())


# =============================================================================
# SERVICE DEPENDENCIES
# =============================================================================

def get_upload_service() -> "UploadService":
    """
    Get an UploadService instance configured from settings.

    Returns:
        UploadService: Service for storing exam files.
    """
    from services import UploadService

    return UploadService(
        upload_dir=settings.records_svc_upload_dir,
        max_size=settings.records_svc_upload_max_size
    )


def get_exam_service() -> "ExamService":
    """
    Get an ExamService instance with its repository and file storage injected.

    Returns:
        ExamService: Service for exam operations.
    """
    from services import ExamService

    return ExamService(
        exam_repository=get_exam_repository(),
        user_repository=get_user_repository(),
        upload_service=get_upload_service(),
        enforce_list_ownership=settings.records_svc_enforce_exam_list_ownership
    )


def get_user_surgery_service() -> "UserSurgeryService":
    """
    Get a UserSurgeryService instance with repositories injected.

    Returns:
        UserSurgeryService: Service for user surgery operations.
    """
    from services import UserSurgeryService

    return UserSurgeryService(
        user_surgery_repository=get_user_surgery_repository(),
        user_repository=get_user_repository(),
        surgery_repository=get_surgery_repository(),
        hospitalization_repository=get_hospitalization_repository()
    )
