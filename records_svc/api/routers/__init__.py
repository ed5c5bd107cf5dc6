"""
API routers module.

This module contains all API route definitions organized by domain.
"""
from api.routers.health import router as health_router
from api.routers.exams import router as exams_router
from api.routers.user_surgeries import router as user_surgeries_router

__all__ = ["health_router", "exams_router", "user_surgeries_router"]
