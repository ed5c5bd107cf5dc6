"""
Shared exception classes and error handling utilities for the Medical Records Service.

This module provides:
- Custom exception hierarchy for domain-specific errors
- handle_errors(): the central translator used by every endpoint
- Exception handlers for FastAPI integration

Response shapes:
    400  {"message": "Erro de validação", "errors": [{"field": ..., "message": ...}]}
    401  {"message": "você não tem acesso a este arquivo"}
    500  {"message": <endpoint default message>}

Usage:
    from core.exceptions import AccessDeniedError, handle_errors

    try:
        return exam_service.download(exam_id, caller_id)
    except Exception as exc:
        return handle_errors(exc, "Erro ao tentar baixar o exame")
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Union

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

VALIDATION_MESSAGE = "Erro de validação"

# Location prefixes FastAPI adds in front of the actual field path
_REQUEST_LOCATIONS = {"body", "query", "path", "header", "cookie"}


@dataclass(frozen=True)
class FieldError:
    """A single violated field, addressed by its dotted path (``hospitalization.location``)."""

    field: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "message": self.message}


def format_loc(loc: Sequence[Union[str, int]], strip_request_location: bool = False) -> str:
    """
    Join a pydantic error location into a dotted field path.

    FastAPI prefixes request errors with where the value came from (``body``,
    ``query``...); pass ``strip_request_location=True`` to drop it. Schema
    locations are kept whole since ``path`` is also a real field name.
    """
    parts = [str(part) for part in loc]
    if strip_request_location and parts and parts[0] in _REQUEST_LOCATIONS:
        parts = parts[1:]
    return ".".join(parts)


# =============================================================================
# BASE EXCEPTION CLASSES
# =============================================================================

class RecordsServiceError(Exception):
    """
    Base exception for all Medical Records Service domain errors.

    All custom exceptions should inherit from this class.
    Provides consistent error structure with status code and message.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "Ocorreu um erro inesperado"

    def __init__(
        self,
        detail: Optional[str] = None,
        status_code: Optional[int] = None,
        **kwargs: Any
    ):
        self.detail = detail or self.__class__.detail
        self.status_code = status_code or self.__class__.status_code
        self.context = kwargs
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        return {"message": self.detail}


class RequestValidationFailed(RecordsServiceError):
    """Raised when a payload violates its schema. Carries every violated field."""

    status_code = status.HTTP_400_BAD_REQUEST
    detail = VALIDATION_MESSAGE

    def __init__(self, errors: List[FieldError], **kwargs: Any):
        self.errors = errors
        super().__init__(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.detail,
            "errors": [error.to_dict() for error in self.errors],
        }


# =============================================================================
# AUTHORIZATION EXCEPTIONS
# =============================================================================

class AuthenticationError(RecordsServiceError):
    """Raised when the bearer token is missing or cannot be verified."""

    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Token inválido"


class AccessDeniedError(RecordsServiceError):
    """Raised when the caller does not own the requested resource."""

    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "você não possui acesso a essas informações"


# =============================================================================
# UPLOAD EXCEPTIONS
# =============================================================================

class UploadError(RecordsServiceError):
    """Base exception for upload-related errors."""

    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Falha no envio do arquivo"


class InvalidFileTypeError(UploadError):
    """Raised when uploaded file has invalid type."""

    status_code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
    detail = "Tipo de arquivo não suportado"


class FileTooLargeError(UploadError):
    """Raised when uploaded file exceeds size limit."""

    status_code = 413  # Content Too Large
    detail = "O arquivo excede o tamanho máximo permitido"


# =============================================================================
# ERROR TRANSLATION
# =============================================================================

def handle_errors(exc: Exception, default_message: str) -> JSONResponse:
    """
    Translate an error raised while serving a request into a JSON response.

    Domain errors keep their own status and message. Anything else is logged
    with its traceback and answered with a 500 carrying ``default_message``;
    the original error text never reaches the client.
    """
    if isinstance(exc, RecordsServiceError):
        logger.warning(
            f"{type(exc).__name__}: {exc.detail}",
            extra={"status_code": exc.status_code, "context": exc.context}
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    logger.error(f"{default_message}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": default_message}
    )


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

async def records_service_exception_handler(
    request: Request,
    exc: RecordsServiceError
) -> JSONResponse:
    """Handle domain errors raised outside an endpoint body (e.g. in dependencies)."""
    logger.warning(
        f"RecordsServiceError: {exc.detail}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method,
        }
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Answer malformed requests (unparseable JSON, wrong body type) with the
    same 400 shape the schema validation uses, instead of FastAPI's 422.
    """
    errors = [
        FieldError(
            field=format_loc(error.get("loc", ()), strip_request_location=True),
            message=error.get("msg", "")
        )
        for error in exc.errors()
    ]
    failure = RequestValidationFailed(errors)
    logger.warning(
        "Malformed request",
        extra={"path": request.url.path, "method": request.method, "errors": len(errors)}
    )
    return JSONResponse(status_code=failure.status_code, content=failure.to_dict())


def setup_exception_handlers(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """
    app.add_exception_handler(RecordsServiceError, records_service_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
