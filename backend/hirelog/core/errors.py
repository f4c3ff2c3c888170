"""
Error taxonomy shared by the services and the HTTP layer.

Services raise these; ``hirelog.main`` maps them to HTTP responses.
"""


class HireLogError(Exception):
    """Base class for errors surfaced to the caller."""

    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationFailed(HireLogError):
    """Missing or invalid input, detected before any store access."""

    status_code = 400


class AuthError(HireLogError):
    """Credentials or token could not be verified."""

    status_code = 401


class AccessDenied(HireLogError):
    """Access-list or authorship check failed. Nothing was changed."""

    status_code = 403


class NotFound(HireLogError):
    status_code = 404


class StoreError(HireLogError):
    """A read or write against the database failed."""

    status_code = 500
