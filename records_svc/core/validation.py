"""
Payload validation for request schemas.

Schemas are plain Pydantic models. ``validate_payload`` runs one of them over
raw request data and, instead of stopping at the first problem, collects
every violated field into a single ``RequestValidationFailed``.

Required-field messages are declared on each schema in ``error_messages``,
keyed by the dotted field path as it appears on the wire::

    class ExamCreate(RequestSchema):
        error_messages: ClassVar[Dict[str, str]] = {
            "name": "Informe um nome para o exame",
        }
"""
import logging
from typing import Any, Dict, List, Type, TypeVar

from pydantic import BaseModel, ValidationError

from core.exceptions import FieldError, RequestValidationFailed, format_loc

logger = logging.getLogger(__name__)

DEFAULT_REQUIRED_MESSAGE = "Campo obrigatório"

# Error types that mean "the value was not provided"
REQUIRED_ERROR_TYPES = {"missing", "string_too_short", "too_short"}

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def _wildcard(path: str) -> str:
    # list positions are addressed as "*" in error_messages ("diseases.*")
    return ".".join("*" if part.isdigit() else part for part in path.split("."))


def _message_for(error: Dict[str, Any], messages: Dict[str, str]) -> str:
    path = format_loc(error.get("loc", ()))
    if error.get("type") in REQUIRED_ERROR_TYPES or error.get("input") is None:
        return messages.get(path) or messages.get(_wildcard(path), DEFAULT_REQUIRED_MESSAGE)
    return error.get("msg", "")


def collect_field_errors(exc: ValidationError, messages: Dict[str, str]) -> List[FieldError]:
    """Convert a pydantic ValidationError into field errors, one per violation."""
    return [
        FieldError(field=format_loc(error.get("loc", ())), message=_message_for(error, messages))
        for error in exc.errors()
    ]


def validate_payload(schema: Type[SchemaT], data: Any) -> SchemaT:
    """
    Validate ``data`` against ``schema``.

    Args:
        schema: The request schema class.
        data: Raw payload (dict, list or scalar, depending on the schema).

    Returns:
        The validated schema instance.

    Raises:
        RequestValidationFailed: With every violated field, never just the first.
    """
    messages: Dict[str, str] = getattr(schema, "error_messages", {}) or {}
    try:
        return schema.model_validate(data)
    except ValidationError as exc:
        errors = collect_field_errors(exc, messages)
        logger.info(
            f"Validation failed for {schema.__name__}",
            extra={"fields": [error.field for error in errors]}
        )
        raise RequestValidationFailed(errors) from exc
