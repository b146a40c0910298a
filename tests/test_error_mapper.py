import os
import sys

import pytest
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app.error_mapper import map_error
from app.errors import (
    InvalidArtifactPath,
    InvalidAuthMethod,
    InvalidCredentials,
    IOFailure,
    MalformedBase64,
    MalformedPair,
    NoCredentialsSupplied,
)

CHALLENGE = 'Basic realm="mvnr", charset="UTF-8"'


@pytest.mark.parametrize("exc, status_code, body", [
    (StarletteHTTPException(status_code=404), 404, "Resource not found"),
    (StarletteHTTPException(status_code=405), 404, "Resource not found"),
    (InvalidArtifactPath("/a/b/", "trailing separator"), 400, "Invalid artifact path specified"),
    (InvalidAuthMethod("Digest"), 401, "Unsupported auth method, use Basic HTTP auth"),
    (MalformedBase64("bad"), 401, "Unsupported auth method, use Basic HTTP auth"),
    (MalformedPair("a:b:c"), 401, "Unsupported auth method, use Basic HTTP auth"),
    (InvalidCredentials("nope"), 401, "Invalid credentials"),
    (IOFailure("write", "/srv/repository/a.jar"), 500, "Upload failed"),
])
def test_mapped_errors_have_no_challenge(exc, status_code, body):
    response = map_error(exc)
    assert response.status_code == status_code
    assert response.body.decode() == body
    assert "www-authenticate" not in response.headers
    assert response.headers["content-type"].startswith("text/plain")


@pytest.mark.parametrize("exc", [
    NoCredentialsSupplied("missing"),
    StarletteHTTPException(status_code=400),
    RequestValidationError([]),
    RuntimeError("boom"),
    ValueError("/srv/repository/secret/path"),
])
def test_everything_else_is_a_challenge(exc):
    """Test missing credentials and unrecognized failures get the challenge."""
    response = map_error(exc)
    assert response.status_code == 401
    assert response.body.decode() == "Auth challenge required"
    assert response.headers["www-authenticate"] == CHALLENGE


def test_io_failure_body_hides_path():
    response = map_error(IOFailure("open", "/srv/repository/a.jar"))
    assert b"/srv" not in response.body
