import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

VALIDATION_MESSAGE = "The given data was invalid."
_LOCATIONS = {"body", "query", "path", "header", "cookie"}


class FieldValidationError(Exception):
    """A validation failure detected after parsing, e.g. a duplicate email."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


def _field_name(loc) -> str:
    parts = [str(p) for p in loc]
    if len(parts) > 1 and parts[0] in _LOCATIONS:
        parts = parts[1:]
    return ".".join(parts) or "body"


def _clean_message(msg: str) -> str:
    # pydantic prefixes messages raised from validators
    prefix = "Value error, "
    return msg[len(prefix):] if msg.startswith(prefix) else msg


def format_validation_errors(errors) -> dict:
    fields = {}
    for err in errors:
        fields.setdefault(_field_name(err.get("loc", ())), []).append(_clean_message(err.get("msg", "")))
    return fields


def validation_response(fields: dict) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": VALIDATION_MESSAGE, "errors": fields})


async def request_validation_handler(request: Request, exc: RequestValidationError):
    fields = format_validation_errors(exc.errors())
    logger.info("Rejected %s %s: %s", request.method, request.url.path, fields)
    return validation_response(fields)


async def field_validation_handler(request: Request, exc: FieldValidationError):
    logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
    return validation_response({exc.field: [exc.message]})


async def generic_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})
