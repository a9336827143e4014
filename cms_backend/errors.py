"""
Error taxonomy shared by repositories and the HTTP layer.
"""

from __future__ import annotations


class CmsError(Exception):
    """Base error; `status_code` is the HTTP status the API responds with."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CmsError):
    status_code = 400


class ConstraintViolation(CmsError):
    """Duplicate email, last active super_admin, and similar invariants."""

    status_code = 400


class NotFoundError(CmsError):
    status_code = 404


class UnauthenticatedError(CmsError):
    status_code = 401


class InvalidTokenError(CmsError):
    status_code = 403


class ForbiddenError(CmsError):
    status_code = 403


class StorageFailure(CmsError):
    status_code = 500
