"""
Upload failure taxonomy.

These errors belong to the remote upload collaborator and are never handled
by the rectification core.
"""


class UploadError(Exception):
    """Base class for remote upload failures."""


class MissingCredentialsError(UploadError):
    """Credentials are not configured or cannot be parsed."""


class TransportError(UploadError):
    """Network or remote API failure not covered by a more specific kind."""


class QuotaExceededError(UploadError):
    """The destination account has no storage or request quota left."""


class AuthExpiredError(UploadError):
    """Credentials were rejected or could not be refreshed."""
