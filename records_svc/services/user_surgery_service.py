"""
Service layer for user surgery operations.

A user surgery ties a user to a surgery from the shared catalogue and to the
hospitalization in which it happened.

Architecture:
    API Layer (routers) → UserSurgeryService → UserSurgeryRepository
                                             → SurgeryRepository
                                             → HospitalizationRepository

Notes:
    - Save and update always insert a new hospitalization. An update leaves
      the previous hospitalization in place, no longer referenced.
    - Hospitalizations are written without diseases; the ``diseases`` list
      accepted on update is validated but not linked.
    - The hospitalization, surgery and join writes are separate transactions.
"""
import asyncio
import logging
from typing import Any, Dict, List, Optional, Union

from fastapi.concurrency import run_in_threadpool

from core.datetime_utils import to_db_string
from core.exceptions import AccessDeniedError
from core.text_utils import format_name
from core.validation import validate_payload
from repositories import (
    HospitalizationRepository,
    SurgeryRepository,
    UserRepository,
    UserSurgeryRepository,
)
from schemas import (
    HospitalizationInput,
    StrictHospitalizationInput,
    UserSurgeryCreate,
    UserSurgeryIdList,
    UserSurgeryIdParam,
    UserSurgeryListItem,
    UserSurgeryResponse,
    UserSurgeryUpdate,
)
from services.user_surgery_view import UserSurgeryView

logger = logging.getLogger(__name__)

LIST_ACCESS_DENIED_MESSAGE = "você não possui acesso a essas informações"
ITEM_ACCESS_DENIED_MESSAGE = "Você não possui acesso a essas informações"
DELETE_DENIED_MESSAGE = "Você não pode excluir esse item"
DELETED_MESSAGE = "Cirurgia excluída com sucesso"


class UserSurgeryService:
    """
    Service layer for user surgery operations.

    Handles validation, ownership checks and the multi-table writes behind
    saving and updating a user surgery.
    """

    def __init__(
        self,
        user_surgery_repository: UserSurgeryRepository,
        surgery_repository: SurgeryRepository,
        hospitalization_repository: HospitalizationRepository,
        user_repository: UserRepository,
        view: Optional[UserSurgeryView] = None
    ):
        """
        Initialize the user surgery service.

        Args:
            user_surgery_repository: Join record data access.
            surgery_repository: Surgery catalogue data access.
            hospitalization_repository: Hospitalization data access.
            user_repository: Registers record owners on their first write.
            view: Formatter for listings. A default UserSurgeryView is used if omitted.
        """
        self._repo = user_surgery_repository
        self._surgery_repo = surgery_repository
        self._hospitalization_repo = hospitalization_repository
        self._users = user_repository
        self._view = view or UserSurgeryView()

    def list_user_surgeries(self, user_id: str, caller_id: str) -> List[UserSurgeryListItem]:
        """
        List the surgeries of ``user_id`` with surgery and hospitalization details.

        Raises:
            RequestValidationFailed: If ``user_id`` is not a UUID.
            AccessDeniedError: If ``user_id`` is not the caller.
        """
        user_id = validate_payload(UserSurgeryIdParam, user_id).root

        if user_id != caller_id:
            raise AccessDeniedError(LIST_ACCESS_DENIED_MESSAGE)

        rows = self._repo.list_by_user_with_details(user_id)
        return self._view.list(rows)

    def get_user_surgery(self, user_surgery_id: str, caller_id: str) -> UserSurgeryResponse:
        """
        Get a single join record owned by the caller.

        A missing record is answered like a foreign one, so callers cannot
        probe which ids exist.

        Raises:
            RequestValidationFailed: If the id is not a UUID.
            AccessDeniedError: If the record is missing or belongs to another user.
        """
        user_surgery_id = validate_payload(UserSurgeryIdParam, user_surgery_id).root

        row = self._repo.get_by_id(user_surgery_id)
        if row is None or row["user_id"] != caller_id:
            raise AccessDeniedError(ITEM_ACCESS_DENIED_MESSAGE, user_surgery_id=user_surgery_id)

        return UserSurgeryResponse.model_validate(row)

    def save_user_surgery(self, data: Any) -> UserSurgeryResponse:
        """
        Record a surgery the user went through.

        Creates a new hospitalization, reuses the catalogue surgery with the
        same normalized name (creating it when absent) and links both to the
        user through a new join record.

        Args:
            data: Raw request body (see UserSurgeryCreate).

        Raises:
            RequestValidationFailed: If any field is missing or invalid.
        """
        payload = validate_payload(UserSurgeryCreate, data)

        self._users.ensure(payload.user_id)
        hospitalization = self._create_hospitalization(payload.user_id, payload.hospitalization)

        surgery_name = format_name(payload.surgery)
        surgery = self._surgery_repo.get_by_name(surgery_name)
        if surgery is None:
            surgery = self._surgery_repo.add(surgery_name)
            logger.info(f"Surgery added to catalogue: {surgery_name}")

        row = self._repo.add(
            user_id=payload.user_id,
            hospitalization_id=hospitalization["id"],
            surgery_id=surgery["id"],
            after_effects=payload.after_effects,
        )
        logger.info(
            "User surgery saved",
            extra={"user_surgery_id": row["id"], "user_id": payload.user_id}
        )
        return UserSurgeryResponse.model_validate(row)

    def update_user_surgery(self, data: Any, caller_id: str) -> UserSurgeryResponse:
        """
        Rewrite the join record ``data["id"]``.

        A new hospitalization is inserted and the record is pointed at it and
        at ``surgeryId``; the record is created if the id does not exist yet.

        Args:
            data: Raw request body (see UserSurgeryUpdate).
            caller_id: Authenticated user id.

        Raises:
            RequestValidationFailed: If any field is missing or invalid.
            AccessDeniedError: If the record or the new owner is not the caller.
        """
        payload = validate_payload(UserSurgeryUpdate, data)

        existing = self._repo.get_by_id(payload.id)
        if payload.user_id != caller_id or (existing is not None and existing["user_id"] != caller_id):
            raise AccessDeniedError(ITEM_ACCESS_DENIED_MESSAGE, user_surgery_id=payload.id)

        self._users.ensure(payload.user_id)
        hospitalization = self._create_hospitalization(payload.user_id, payload.hospitalization)

        row = self._repo.save(
            user_surgery_id=payload.id,
            user_id=payload.user_id,
            hospitalization_id=hospitalization["id"],
            surgery_id=payload.surgery_id,
            after_effects=payload.after_effects,
        )
        logger.info(
            "User surgery updated",
            extra={"user_surgery_id": row["id"], "hospitalization_id": hospitalization["id"]}
        )
        return UserSurgeryResponse.model_validate(row)

    async def delete_user_surgeries(self, ids: Any, caller_id: str) -> List[Dict[str, str]]:
        """
        Delete every listed join record the caller owns.

        Each id is handled independently and concurrently; records owned by
        someone else are reported and left untouched. Nothing is rolled back.

        Args:
            ids: Raw request body, a non-empty list of UUIDs.
            caller_id: Authenticated user id.

        Returns:
            One ``{surgery name: outcome message}`` mapping per id. Ids with no
            record are keyed by the id itself.

        Raises:
            RequestValidationFailed: If the list is empty or holds invalid ids.
        """
        user_surgery_ids = validate_payload(UserSurgeryIdList, ids).root

        outcomes = await asyncio.gather(*(
            run_in_threadpool(self._delete_one, user_surgery_id, caller_id)
            for user_surgery_id in user_surgery_ids
        ))
        return list(outcomes)

    def _delete_one(self, user_surgery_id: str, caller_id: str) -> Dict[str, str]:
        row = self._repo.get_with_surgery(user_surgery_id)
        key = row["surgery_name"] if row is not None else user_surgery_id

        if row is None or row["user_id"] != caller_id:
            logger.warning(
                "Refused to delete user surgery",
                extra={"user_surgery_id": user_surgery_id, "found": row is not None}
            )
            return {key: DELETE_DENIED_MESSAGE}

        self._repo.delete(user_surgery_id)
        logger.info("User surgery deleted", extra={"user_surgery_id": user_surgery_id})
        return {key: DELETED_MESSAGE}

    def _create_hospitalization(
        self,
        user_id: str,
        hospitalization: Union[HospitalizationInput, StrictHospitalizationInput]
    ) -> Dict[str, Any]:
        # Disease linking is not offered yet: the list is always written empty
        if getattr(hospitalization, "diseases", None):
            logger.info(
                "Ignoring diseases sent with hospitalization",
                extra={"count": len(hospitalization.diseases)}
            )

        return self._hospitalization_repo.add(
            user_id=user_id,
            entrance_date=to_db_string(hospitalization.entrance_date),
            exit_date=to_db_string(hospitalization.exit_date),
            location=hospitalization.location,
            reason=hospitalization.reason,
            disease_ids=[],
        )
