"""Google Drive uploader.

Uploads a finished file into the configured folder and returns the remote
file id. The Drive client is built on first use and discarded whenever the
remote side rejects the credentials, so the next call authenticates again.
No retries are performed.
"""

import logging
from pathlib import Path
from typing import Any, Callable, Optional, Union

import httplib2
from google.auth import exceptions as google_auth_exceptions
from google.auth.credentials import Credentials
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaFileUpload, set_user_agent

from .config import UploadConfig
from .credentials import CredentialProvider
from .errors import (
    AuthExpiredError,
    QuotaExceededError,
    TransportError,
    UploadError,
)

logger = logging.getLogger(__name__)

QUOTA_REASONS = (
    "storageQuotaExceeded",
    "quotaExceeded",
    "userRateLimitExceeded",
    "rateLimitExceeded",
)

ClientFactory = Callable[[Credentials, UploadConfig], Any]


def build_drive_client(credentials: Credentials, config: UploadConfig) -> Any:
    """Build a Drive v3 API client reporting ``config.application_name``."""
    from googleapiclient.discovery import build

    http = set_user_agent(httplib2.Http(), config.application_name)
    return build(
        "drive",
        "v3",
        http=AuthorizedHttp(credentials, http=http),
        cache_discovery=False,
    )


def classify_http_error(error: HttpError) -> UploadError:
    """Map a Drive API HTTP error onto the upload error taxonomy."""
    status = getattr(error.resp, "status", None)
    try:
        status = int(status)
    except (TypeError, ValueError):
        status = None

    body = error.content.decode("utf-8", errors="replace") if error.content else ""
    message = f"Drive API error {status}: {error.reason or body}"

    if status == 401:
        return AuthExpiredError(message)
    if status == 429 or (status == 403 and any(r in body for r in QUOTA_REASONS)):
        return QuotaExceededError(message)
    return TransportError(message)


class DriveUploader:
    """
    Uploads files to Google Drive with credentials from a CredentialProvider.

    Example:
        >>> config = load_upload_config()
        >>> uploader = DriveUploader(build_credential_provider(config), config)
        >>> file_id = uploader.upload_file(Path("page.png"), "page.png", "image/png")
    """

    def __init__(
        self,
        credential_provider: CredentialProvider,
        config: Optional[UploadConfig] = None,
        client_factory: Optional[ClientFactory] = None,
    ):
        self.credential_provider = credential_provider
        self.config = config or credential_provider.config
        self._client_factory = client_factory or build_drive_client
        self._client: Optional[Any] = None  # Lazy-loaded

    @property
    def client(self) -> Any:
        """Drive client, built on first access.

        Raises:
            MissingCredentialsError: If the provider has nothing configured.
            AuthExpiredError: If credentials cannot be refreshed.
        """
        if self._client is None:
            credentials = self.credential_provider.get_credentials()
            try:
                self._client = self._client_factory(credentials, self.config)
            except google_auth_exceptions.RefreshError as e:
                self.credential_provider.invalidate()
                raise AuthExpiredError(f"Credential refresh failed: {e}") from e
            logger.info(
                f"Drive client established using {self.credential_provider.name}"
            )
        return self._client

    def invalidate(self) -> None:
        """Drop the cached client and provider credentials."""
        self._client = None
        self.credential_provider.invalidate()
        logger.debug("Drive client invalidated")

    def upload_file(
        self, file_path: Union[str, Path], file_name: str, mime_type: str
    ) -> str:
        """
        Upload a local file.

        Args:
            file_path: File to upload.
            file_name: Name of the remote file.
            mime_type: MIME type of the content, e.g. "image/png".

        Returns:
            Remote file id.

        Raises:
            FileNotFoundError: If ``file_path`` does not exist.
            MissingCredentialsError, AuthExpiredError, QuotaExceededError,
            TransportError: On credential or remote failures.
        """
        file_path = Path(file_path)
        if not file_path.is_file():
            raise FileNotFoundError(f"Upload source not found: {file_path}")

        logger.info(f"Attempting to upload file to Google Drive: {file_name}")

        metadata = {"name": file_name}
        if self.config.target_folder_id:
            metadata["parents"] = [self.config.target_folder_id]

        service = self.client
        media = MediaFileUpload(str(file_path), mimetype=mime_type, resumable=False)

        try:
            created = (
                service.files()
                .create(body=metadata, media_body=media, fields="id")
                .execute()
            )
        except HttpError as e:
            error = classify_http_error(e)
            logger.error(f"Google Drive upload failed: {error}")
            if isinstance(error, AuthExpiredError):
                self.invalidate()
            elif isinstance(error, QuotaExceededError):
                logger.error(
                    "Destination has no quota left; share the target folder "
                    f"({self.config.target_folder_id}) with the uploading account "
                    "and grant Editor permissions"
                )
            raise error from e
        except google_auth_exceptions.RefreshError as e:
            self.invalidate()
            logger.error(f"Google Drive upload failed: {e}")
            raise AuthExpiredError(f"Credential refresh failed: {e}") from e
        except (
            google_auth_exceptions.TransportError,
            httplib2.HttpLib2Error,
            OSError,
        ) as e:
            logger.error(f"Google Drive upload failed: {e}")
            raise TransportError(f"Transport failure during upload: {e}") from e

        file_id = created.get("id")
        if not file_id:
            raise TransportError("Drive API response did not include a file id")

        logger.info(f"File successfully uploaded to Google Drive. ID: {file_id}")
        return file_id
