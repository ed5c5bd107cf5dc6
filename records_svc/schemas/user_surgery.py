"""
Pydantic schemas for user surgery API operations.

A user surgery is saved together with the hospitalization in which it
happened. Saving accepts the surgery by name; updating references an
existing surgery by id and enforces exact ISO 8601 dates.
"""
from typing import Annotated, ClassVar, Dict, List, Optional

from pydantic import Field, RootModel

from schemas.common import (
    LenientDateTime,
    OptionalLenientDateTime,
    OptionalStrictDateTime,
    RequestSchema,
    RequiredStr,
    ResponseSchema,
    StrictDateTime,
    UuidStr,
)

HOSPITALIZATION_MESSAGES = {
    "hospitalization": "Informe os dados da internação",
    "hospitalization.entranceDate": "Informe a data de entrada",
    "hospitalization.location": "Informe aonde aconteceu a internação",
    "hospitalization.reason": "Informe o motivo da internação",
}


# =============================================================================
# REQUESTS
# =============================================================================

class HospitalizationInput(RequestSchema):
    entrance_date: LenientDateTime
    exit_date: OptionalLenientDateTime = None
    location: RequiredStr
    reason: RequiredStr


class StrictHospitalizationInput(RequestSchema):
    entrance_date: StrictDateTime
    exit_date: OptionalStrictDateTime = None
    location: RequiredStr
    reason: RequiredStr
    # Accepted and validated, but never linked (see UserSurgeryService)
    diseases: Optional[List[UuidStr]] = None


class UserSurgeryCreate(RequestSchema):
    """Schema for saving a surgery the user went through."""

    error_messages: ClassVar[Dict[str, str]] = {
        "userId": "Informe o id",
        "surgery": "Informe a cirurgia realizada",
        **HOSPITALIZATION_MESSAGES,
    }

    user_id: UuidStr
    hospitalization: HospitalizationInput
    surgery: RequiredStr
    after_effects: Optional[str] = None


class UserSurgeryUpdate(RequestSchema):
    """Schema for rewriting an existing user surgery."""

    error_messages: ClassVar[Dict[str, str]] = {
        "id": "Informe o id",
        "userId": "Informe o id",
        "surgeryId": "Informe o id",
        "hospitalization.diseases.*": "Informe o id",
        **HOSPITALIZATION_MESSAGES,
    }

    id: UuidStr
    user_id: UuidStr
    hospitalization: StrictHospitalizationInput
    surgery_id: UuidStr
    after_effects: Optional[str] = None


class UserSurgeryIdParam(RootModel[UuidStr]):
    """A single user surgery or user id taken from the path."""

    error_messages: ClassVar[Dict[str, str]] = {"": "Informe o id"}


class UserSurgeryIdList(RootModel[Annotated[List[UuidStr], Field(min_length=1)]]):
    """Body of the bulk delete: a non-empty list of user surgery ids."""

    error_messages: ClassVar[Dict[str, str]] = {
        "": "Informe uma lista com os ID's das cirurgias",
        "*": "Informe o id",
    }


# =============================================================================
# RESPONSES
# =============================================================================

class UserSurgeryResponse(ResponseSchema):
    """The raw join record."""

    id: str
    user_id: str
    hospitalization_id: str
    surgery_id: str
    after_effects: Optional[str] = None


class SurgerySummary(ResponseSchema):
    id: str
    name: str


class HospitalizationSummary(ResponseSchema):
    id: str
    entrance_date: str
    exit_date: Optional[str] = None
    location: str
    reason: str


class UserSurgeryListItem(ResponseSchema):
    """A user surgery as shown in the user's history."""

    id: str
    after_effects: Optional[str] = None
    surgery: SurgerySummary
    hospitalization: HospitalizationSummary
