import hmac
from typing import Optional

from fastapi import Request

from app.error_mapper import handle_error
from app.errors import InvalidAuthMethod, InvalidCredentials, MalformedCredentials, NoCredentialsSupplied, Rejection
from app.services.credentials import decode_basic_token
from logger_config import get_logger

logger = get_logger()

BASIC_SCHEME = "Basic"


class AuthGate:
    def __init__(self, password: str):
        self._secret = password.encode("utf-8")

    def parse_authorization(self, header: str) -> str:
        """Return the opaque token of a ``Basic <token>`` header."""
        scheme, _, token = header.partition(" ")
        token = token.strip()
        if scheme != BASIC_SCHEME or not token or any(c.isspace() for c in token):
            raise InvalidAuthMethod(f"Unsupported auth scheme '{scheme}'")
        return token

    def check(self, header: Optional[str]) -> None:
        """Admit the request or raise the matching Rejection."""
        if header is None:
            raise NoCredentialsSupplied("No Authorization header")

        token = self.parse_authorization(header)
        try:
            credentials = decode_basic_token(token)
        except MalformedCredentials as e:
            logger.warning(f"Malformed Basic credentials: {e}")
            raise

        # Constant-time comparison
        if not hmac.compare_digest(credentials.password.encode("utf-8"), self._secret):
            logger.warning(f"Invalid credentials supplied for user '{credentials.user}'")
            raise InvalidCredentials("Invalid credentials")


async def authenticate_requests(request: Request, call_next):
    """HTTP middleware running the app's AuthGate before any routing."""
    auth_gate: AuthGate = request.app.state.auth_gate
    try:
        auth_gate.check(request.headers.get("authorization"))
    except Rejection as e:
        return await handle_error(request, e)
    return await call_next(request)
