"""
Remote upload collaborator.

Uploads an already-serialized file to Google Drive. Credential acquisition is
pluggable through CredentialProvider variants selected by configuration.
"""

from .config import UploadConfig, load_upload_config
from .credentials import (
    CredentialProvider,
    InteractiveOAuthProvider,
    RefreshTokenProvider,
    ServiceAccountKeyProvider,
    build_credential_provider,
)
from .drive import DriveUploader, classify_http_error
from .errors import (
    AuthExpiredError,
    MissingCredentialsError,
    QuotaExceededError,
    TransportError,
    UploadError,
)

__all__ = [
    "UploadConfig",
    "load_upload_config",
    "CredentialProvider",
    "ServiceAccountKeyProvider",
    "InteractiveOAuthProvider",
    "RefreshTokenProvider",
    "build_credential_provider",
    "DriveUploader",
    "classify_http_error",
    "UploadError",
    "MissingCredentialsError",
    "TransportError",
    "QuotaExceededError",
    "AuthExpiredError",
]
