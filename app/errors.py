"""Typed request failures, turned into HTTP responses by app.error_mapper."""


class Rejection(Exception):
    """Base class for every failure raised while handling a request."""


class InvalidAuthMethod(Rejection):
    """Authorization header is not ``Basic <token>``."""


class MalformedCredentials(InvalidAuthMethod):
    """The Basic token could not be decoded into a user/password pair."""


class MalformedBase64(MalformedCredentials):
    pass


class MalformedText(MalformedCredentials):
    pass


class MissingSeparator(MalformedCredentials):
    pass


class MalformedPair(MalformedCredentials):
    pass


class InvalidCredentials(Rejection):
    """Decoded password does not match the configured secret."""


class NoCredentialsSupplied(Rejection):
    """No Authorization header at all; answered with an auth challenge."""


class InvalidArtifactPath(Rejection):
    def __init__(self, request_path: str, reason: str):
        super().__init__(f"{reason}: {request_path}")
        self.request_path = request_path
        self.reason = reason


class IOFailure(Rejection):
    def __init__(self, operation: str, path):
        super().__init__(f"{operation} failed for {path}")
        self.operation = operation
        self.path = path
