"""Credential providers for the remote upload collaborator.

Each provider produces an opaque ``google.auth.credentials.Credentials``
object which the uploader consumes identically. The variant is selected by
``UploadConfig.credential_mode``:

- ``service_account``: static service-account key (optionally impersonating
  a user through domain-wide delegation)
- ``interactive_oauth``: installed-app authorization-code flow in a browser
- ``refresh_token``: stored OAuth refresh token exchanged for access tokens
"""

import json
import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from google.auth.credentials import Credentials
from google.oauth2 import credentials as user_credentials
from google.oauth2 import service_account

from .config import UploadConfig
from .errors import MissingCredentialsError

logger = logging.getLogger(__name__)


class CredentialProvider:
    """Produces bearer credentials for the upload client."""

    def __init__(self, config: UploadConfig, env: Optional[Mapping[str, str]] = None):
        self.config = config
        self.env = os.environ if env is None else env

    def get_credentials(self) -> Credentials:
        """Return credentials scoped for upload.

        Raises:
            MissingCredentialsError: If nothing usable is configured.
        """
        raise NotImplementedError

    def invalidate(self) -> None:
        """Forget any cached credentials after an auth failure."""

    @property
    def name(self) -> str:
        return type(self).__name__


class ServiceAccountKeyProvider(CredentialProvider):
    """Service-account key from an env var (inline JSON) or a key file."""

    def __init__(self, config: UploadConfig, env: Optional[Mapping[str, str]] = None):
        super().__init__(config, env)
        self.account_email = "Unknown"

    def _load_key_info(self) -> dict:
        raw = self.env.get(self.config.service_account_json_env)
        source = self.config.service_account_json_env

        if not raw and self.config.service_account_file:
            key_path = Path(self.config.service_account_file)
            if not key_path.exists():
                raise MissingCredentialsError(
                    f"Service account key file not found: {key_path}"
                )
            raw = key_path.read_text(encoding="utf-8")
            source = str(key_path)

        if not raw:
            raise MissingCredentialsError(
                f"{self.config.service_account_json_env} environment variable is not set"
            )

        try:
            return json.loads(raw)
        except ValueError as e:
            raise MissingCredentialsError(
                f"Invalid service account credentials in {source}"
            ) from e

    def get_credentials(self) -> Credentials:
        info = self._load_key_info()
        try:
            creds = service_account.Credentials.from_service_account_info(
                info, scopes=self.config.scopes
            )
        except (ValueError, KeyError) as e:
            raise MissingCredentialsError(
                f"Invalid service account credentials: {e}"
            ) from e

        if self.config.subject:
            creds = creds.with_subject(self.config.subject)

        self.account_email = getattr(creds, "service_account_email", "Unknown")
        logger.info(f"Using service account {self.account_email}")
        return creds


class InteractiveOAuthProvider(CredentialProvider):
    """Installed-app OAuth flow; the user authorizes once per process."""

    CLIENT_SECRETS_ENV = "GOOGLE_OAUTH_CLIENT_SECRETS"

    def __init__(self, config: UploadConfig, env: Optional[Mapping[str, str]] = None):
        super().__init__(config, env)
        self._credentials: Optional[Credentials] = None

    def get_credentials(self) -> Credentials:
        if self._credentials is not None and self._credentials.valid:
            return self._credentials

        secrets = self.config.client_secrets_file or self.env.get(self.CLIENT_SECRETS_ENV)
        if not secrets or not Path(secrets).exists():
            raise MissingCredentialsError(
                "OAuth client secrets file is not configured or does not exist"
            )

        from google_auth_oauthlib.flow import InstalledAppFlow

        flow = InstalledAppFlow.from_client_secrets_file(secrets, self.config.scopes)
        self._credentials = flow.run_local_server(port=self.config.oauth_port)
        logger.info("Interactive OAuth authorization completed")
        return self._credentials

    def invalidate(self) -> None:
        self._credentials = None


class RefreshTokenProvider(CredentialProvider):
    """OAuth user credentials rebuilt from a stored refresh token."""

    def get_credentials(self) -> Credentials:
        values = {
            "client_id": self.env.get(self.config.client_id_env),
            "client_secret": self.env.get(self.config.client_secret_env),
            "refresh_token": self.env.get(self.config.refresh_token_env),
        }
        missing = [key for key, value in values.items() if not value]
        if missing:
            raise MissingCredentialsError(
                f"Missing OAuth settings: {', '.join(missing)}"
            )

        return user_credentials.Credentials(
            token=None,
            refresh_token=values["refresh_token"],
            client_id=values["client_id"],
            client_secret=values["client_secret"],
            token_uri=self.config.token_uri,
            scopes=self.config.scopes,
        )


PROVIDERS = {
    "service_account": ServiceAccountKeyProvider,
    "interactive_oauth": InteractiveOAuthProvider,
    "refresh_token": RefreshTokenProvider,
}


def build_credential_provider(
    config: UploadConfig, env: Optional[Mapping[str, str]] = None
) -> CredentialProvider:
    """Instantiate the provider selected by ``config.credential_mode``."""
    try:
        provider_cls = PROVIDERS[config.credential_mode]
    except KeyError as e:
        raise ValueError(f"Unknown credential mode: {config.credential_mode}") from e
    return provider_cls(config, env)
