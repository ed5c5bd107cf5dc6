"""
Field types and base classes shared by the request and response schemas.

Payloads use camelCase keys on the wire (``userId``, ``entranceDate``) and
snake_case attributes in Python.
"""
import re
from datetime import datetime
from typing import Annotated, Any, ClassVar, Dict, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from core.datetime_utils import parse_datetime, parse_iso_strict

INVALID_ID_MESSAGE = "Id informado inválido"
INVALID_DATE_MESSAGE = "Data não é valida"

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)


def _check_uuid(value: str) -> str:
    if not UUID_PATTERN.match(value):
        raise PydanticCustomError("uuid_invalid", INVALID_ID_MESSAGE)
    return value


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _lenient_date(value: Any) -> Any:
    value = _blank_to_none(value)
    if value is None:
        return None
    try:
        return parse_datetime(value)
    except ValueError:
        raise PydanticCustomError("date_invalid", INVALID_DATE_MESSAGE)


def _strict_date(value: Any) -> Any:
    value = _blank_to_none(value)
    if value is None:
        return None
    try:
        return parse_iso_strict(value)
    except ValueError:
        raise PydanticCustomError("date_invalid", INVALID_DATE_MESSAGE)


RequiredStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

UuidStr = Annotated[
    str,
    StringConstraints(strip_whitespace=True, min_length=1),
    AfterValidator(_check_uuid),
]

# Any format parse_datetime understands, normalized to UTC
LenientDateTime = Annotated[datetime, BeforeValidator(_lenient_date)]
OptionalLenientDateTime = Annotated[Optional[datetime], BeforeValidator(_lenient_date)]

# Only YYYY-MM-DDTHH:MM:SS with Z or an offset
StrictDateTime = Annotated[datetime, BeforeValidator(_strict_date)]
OptionalStrictDateTime = Annotated[Optional[datetime], BeforeValidator(_strict_date)]


class RequestSchema(BaseModel):
    """
    Base class for request payloads.

    ``error_messages`` maps dotted wire paths to the message reported when
    that field is missing or empty.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    error_messages: ClassVar[Dict[str, str]] = {}


class ResponseSchema(BaseModel):
    """Base class for response payloads (serialized with camelCase keys)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
