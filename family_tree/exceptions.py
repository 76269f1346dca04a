"""Exceptions.

Each exception knows the HTTP status and the ``error`` label it is reported
with, see ``family_tree.main`` for the handlers.
"""
from typing import Dict, Optional


class FamilyTreeError(RuntimeError):
    """Base for errors reported to API callers."""

    status_code = 500
    error = 'Server error'

    def __init__(self, message: str = '', error: Optional[str] = None):
        super().__init__(message)
        if error:
            self.error = error
        self.message = message or self.error

    def to_dict(self) -> dict:
        return {'error': self.error, 'message': self.message}


class InvalidToken(FamilyTreeError):
    """Identity provider token is malformed, expired, untrusted or lacks an email."""

    status_code = 400
    error = 'Invalid token'


class InvalidSessionToken(InvalidToken):
    """Session token failed the signature or expiry check."""

    status_code = 401


class Unauthenticated(FamilyTreeError):
    """No usable ``Authorization: Bearer`` header."""

    status_code = 401
    error = 'Missing or invalid authorization header'


class UserNotFound(FamilyTreeError):
    """Session is valid but the user row is gone."""

    status_code = 404
    error = 'User not found'


class FamilyTreeNotFound(FamilyTreeError):
    """Tree does not exist or is not owned by the caller."""

    status_code = 404
    error = 'Family tree not found'


class ValidationError(FamilyTreeError):
    """Caller supplied data is missing or invalid."""

    status_code = 400
    error = 'Invalid family tree data'

    def __init__(self, message: str = '', errors: Optional[Dict[str, str]] = None,
                 error: Optional[str] = None):
        super().__init__(message, error)
        self.errors = errors or {}

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.errors:
            data['errors'] = self.errors
        return data


class ConfigurationError(FamilyTreeError):
    """A required secret or setting is missing."""

    status_code = 500
    error = 'Server misconfigured'


class DependencyUnavailable(FamilyTreeError):
    """The database is not configured or cannot be reached."""

    status_code = 500
    error = 'Database connection unavailable'
