"""
User surgeries router - a user's surgical history.

All endpoints require a bearer token. Request bodies are accepted as raw
JSON and validated by the service, so every field error is reported in one
400 response.

Architecture:
    HTTP Request → Router (this file) → UserSurgeryService → Repositories → Database
"""
import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends

from core.auth import get_current_user_id
from core.dependencies import get_user_surgery_service
from core.exceptions import handle_errors
from schemas import UserSurgeryListItem, UserSurgeryResponse
from services import UserSurgeryService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/user-surgeries",
    tags=["User Surgeries"],
)

LIST_ERROR_MESSAGE = "Erro ao listar as cirurgias do usuário"
GET_ERROR_MESSAGE = "Erro ao tentar listar as informações"
SAVE_ERROR_MESSAGE = "Erro ao salvar a cirurgia"
UPDATE_ERROR_MESSAGE = "Erro ao atualizar a cirurgia"
DELETE_ERROR_MESSAGE = "Erro ao excluir as internações do usuário"


@router.get(
    "/user/{user_id}",
    response_model=List[UserSurgeryListItem],
    summary="List a user's surgeries",
    description="Surgical history of the caller with surgery and hospitalization details."
)
async def list_user_surgeries(
    user_id: str,
    caller_id: str = Depends(get_current_user_id),
    service: UserSurgeryService = Depends(get_user_surgery_service)
):
    """
    List the surgeries of a user. Only the user themselves may list them.

    Raises:
    - 400 Bad Request: If the id is not a UUID
    - 401 Unauthorized: If the id is not the caller's
    """
    try:
        return service.list_user_surgeries(user_id, caller_id)
    except Exception as exc:
        return handle_errors(exc, LIST_ERROR_MESSAGE)


@router.get(
    "/{user_surgery_id}",
    response_model=UserSurgeryResponse,
    summary="Get a user surgery"
)
async def get_user_surgery(
    user_surgery_id: str,
    caller_id: str = Depends(get_current_user_id),
    service: UserSurgeryService = Depends(get_user_surgery_service)
):
    try:
        return service.get_user_surgery(user_surgery_id, caller_id)
    except Exception as exc:
        return handle_errors(exc, GET_ERROR_MESSAGE)


@router.post(
    "",
    response_model=UserSurgeryResponse,
    status_code=201,
    summary="Record a surgery",
    description="Create a hospitalization and link it and the named surgery to the user."
)
async def save_user_surgery(
    body: Any = Body(None),
    caller_id: str = Depends(get_current_user_id),
    service: UserSurgeryService = Depends(get_user_surgery_service)
):
    """
    Record a surgery.

    - **userId**: Owner UUID
    - **hospitalization**: ``entranceDate``, ``exitDate``, ``location``, ``reason``
    - **surgery**: Surgery name, matched against the catalogue after normalization
    - **afterEffects**: Optional free text
    """
    try:
        return service.save_user_surgery(body)
    except Exception as exc:
        return handle_errors(exc, SAVE_ERROR_MESSAGE)


@router.put(
    "",
    response_model=UserSurgeryResponse,
    summary="Rewrite a user surgery",
    description="Point a user surgery at a new hospitalization and the given surgery."
)
async def update_user_surgery(
    body: Any = Body(None),
    caller_id: str = Depends(get_current_user_id),
    service: UserSurgeryService = Depends(get_user_surgery_service)
):
    """
    Update a user surgery.

    Dates must be strict ISO-8601 (``YYYY-MM-DDTHH:MM:SS`` followed by ``Z``
    or an offset). A new hospitalization is always created.

    Raises:
    - 400 Bad Request: Missing or invalid fields
    - 401 Unauthorized: If the record or the new owner is not the caller
    """
    try:
        return service.update_user_surgery(body, caller_id)
    except Exception as exc:
        return handle_errors(exc, UPDATE_ERROR_MESSAGE)


@router.delete(
    "",
    response_model=List[Dict[str, str]],
    summary="Delete user surgeries",
    description="Delete every listed user surgery owned by the caller and report the outcome per id."
)
async def delete_user_surgeries(
    body: Any = Body(None),
    caller_id: str = Depends(get_current_user_id),
    service: UserSurgeryService = Depends(get_user_surgery_service)
):
    """
    Delete many user surgeries.

    The body is a JSON array of ids. Each entry of the response maps the
    surgery name (or the id, when nothing was found) to its outcome.
    """
    try:
        return await service.delete_user_surgeries(body, caller_id)
    except Exception as exc:
        return handle_errors(exc, DELETE_ERROR_MESSAGE)
