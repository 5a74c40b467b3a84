"""Error responses for the customer API.

Request bodies that fail to parse or validate are answered with a 400 and the
fixed message of the route they were sent to, instead of FastAPI's 422
validation report.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler, request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = structlog.get_logger(__name__)

INVALID_CUSTOMER = "Invalid customer payload"
INVALID_PREFERENCES = "Invalid preferences payload"
BODY_TOO_LARGE = "Request body too large"

# Route name -> message for a rejected request body
PAYLOAD_ERRORS = {
    "create_customer": INVALID_CUSTOMER,
    "update_preferences": INVALID_PREFERENCES,
}


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _payload_error(request: Request) -> str | None:
    route = request.scope.get("route")
    return PAYLOAD_ERRORS.get(getattr(route, "name", None))


async def invalid_payload_handler(request: Request, exc: RequestValidationError):
    message = _payload_error(request)
    if message is None:
        return await request_validation_exception_handler(request, exc)
    logger.debug("Rejected request body", path=request.url.path, errors=len(exc.errors()))
    return error_response(400, message)


async def unparseable_payload_handler(request: Request, exc: StarletteHTTPException):
    # FastAPI answers bodies it cannot decode at all (e.g. nested too deeply) with a plain 400
    message = _payload_error(request) if exc.status_code == 400 else None
    if message is None:
        return await http_exception_handler(request, exc)
    logger.debug("Rejected request body", path=request.url.path, detail=exc.detail)
    return error_response(400, message)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, invalid_payload_handler)
    app.add_exception_handler(StarletteHTTPException, unparseable_payload_handler)
