from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.errors import InvalidArtifactPath, InvalidAuthMethod, InvalidCredentials, IOFailure, Rejection
import config
from logger_config import get_logger

logger = get_logger()

CHALLENGE_HEADER = f'Basic realm="{config.REALM}", charset="UTF-8"'

NOT_FOUND = (404, "Resource not found")
INVALID_ARTIFACT_PATH = (400, "Invalid artifact path specified")
INVALID_AUTH_METHOD = (401, "Unsupported auth method, use Basic HTTP auth")
INVALID_CREDENTIALS = (401, "Invalid credentials")
IO_FAILURE = (500, "Upload failed")
AUTH_CHALLENGE = (401, "Auth challenge required")


def is_routing_miss(exc: Exception) -> bool:
    return isinstance(exc, StarletteHTTPException) and exc.status_code in (404, 405)


def map_error(exc: Exception) -> PlainTextResponse:
    """Pick the response for a failure. Order matters: first match wins."""
    if is_routing_miss(exc):
        status_code, message = NOT_FOUND
    elif isinstance(exc, InvalidArtifactPath):
        status_code, message = INVALID_ARTIFACT_PATH
    elif isinstance(exc, InvalidAuthMethod):
        status_code, message = INVALID_AUTH_METHOD
    elif isinstance(exc, InvalidCredentials):
        status_code, message = INVALID_CREDENTIALS
    elif isinstance(exc, IOFailure):
        status_code, message = IO_FAILURE
    else:
        status_code, message = AUTH_CHALLENGE
        return PlainTextResponse(
            message,
            status_code=status_code,
            headers={"WWW-Authenticate": CHALLENGE_HEADER}
        )

    return PlainTextResponse(message, status_code=status_code)


async def handle_error(request: Request, exc: Exception) -> PlainTextResponse:
    response = map_error(exc)
    if isinstance(exc, (Rejection, StarletteHTTPException, RequestValidationError)):
        logger.debug(f"{request.method} {request.url.path} rejected with {response.status_code}: {exc}")
    else:
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc!r}")
    return response


def register_error_handlers(app: FastAPI):
    """Route every failure of the app through map_error."""
    app.add_exception_handler(StarletteHTTPException, handle_error)
    app.add_exception_handler(RequestValidationError, handle_error)
    app.add_exception_handler(Rejection, handle_error)
    # Anything unforeseen, answered by the server error middleware
    app.add_exception_handler(Exception, handle_error)
