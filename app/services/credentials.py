import base64
import binascii
from dataclasses import dataclass

from app.errors import MalformedBase64, MalformedText, MissingSeparator, MalformedPair


@dataclass(frozen=True)
class BasicCredentials:
    user: str
    password: str

    def __repr__(self) -> str:
        return f"BasicCredentials(user={self.user!r}, password='***')"


def decode_basic_token(token: str) -> BasicCredentials:
    """Decode the token that follows ``Basic `` in an Authorization header.

    The decoded text must hold exactly one ``:``. Passwords containing ``:``
    are rejected with MalformedPair instead of being split on the first colon.
    """
    try:
        raw = base64.b64decode(token, validate=True)
    except (binascii.Error, ValueError):
        raise MalformedBase64("Invalid base64 in authorization header")

    try:
        pair = raw.decode("utf-8")
    except UnicodeDecodeError:
        raise MalformedText("Authorization header credentials are not valid UTF-8")

    if ":" not in pair:
        raise MissingSeparator("Invalid user-id/password pair: data must be separated by ':'")

    fields = pair.split(":")
    if len(fields) != 2:
        raise MalformedPair("Invalid user-id/password pair: pair length must be equal 2")

    user, password = fields
    return BasicCredentials(user=user, password=password)
