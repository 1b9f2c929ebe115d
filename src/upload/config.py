"""Configuration for the remote upload collaborator.

Non-secret settings come from YAML; secrets (service-account JSON, OAuth
client secret, refresh token) are only ever read from the environment by the
credential providers. ``GOOGLE_DRIVE_TARGET_FOLDER_ID`` overrides the
configured target folder.
"""

import logging
import os
from pathlib import Path
from typing import List, Literal, Mapping, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"

DRIVE_FILE_SCOPE = "https://www.googleapis.com/auth/drive.file"

TARGET_FOLDER_ENV = "GOOGLE_DRIVE_TARGET_FOLDER_ID"


class UploadConfig(BaseModel):
    """Remote upload configuration.

    Attributes:
        credential_mode: Which CredentialProvider variant to build
        target_folder_id: Destination folder (None uploads to the drive root)
        application_name: Reported to the API in the user agent
        scopes: OAuth scopes requested for every credential kind
        service_account_json_env: Env var holding the service-account key JSON
        service_account_file: Key file used when the env var is unset
        subject: User to impersonate with domain-wide delegation
        client_secrets_file: OAuth client secrets for the interactive flow
        oauth_port: Local redirect port for the interactive flow (0 = any)
        client_id_env: Env var holding the OAuth client id
        client_secret_env: Env var holding the OAuth client secret
        refresh_token_env: Env var holding the long-lived refresh token
        token_uri: OAuth token endpoint
    """

    credential_mode: Literal["service_account", "interactive_oauth", "refresh_token"] = (
        "service_account"
    )
    target_folder_id: Optional[str] = None
    application_name: str = "document-rectifier"
    scopes: List[str] = Field(default_factory=lambda: [DRIVE_FILE_SCOPE])

    service_account_json_env: str = "GOOGLE_SERVICE_ACCOUNT_JSON"
    service_account_file: Optional[str] = None
    subject: Optional[str] = None

    client_secrets_file: Optional[str] = None
    oauth_port: int = Field(default=0, ge=0, le=65535)

    client_id_env: str = "GOOGLE_OAUTH_CLIENT_ID"
    client_secret_env: str = "GOOGLE_OAUTH_CLIENT_SECRET"
    refresh_token_env: str = "GOOGLE_OAUTH_REFRESH_TOKEN"
    token_uri: str = "https://oauth2.googleapis.com/token"


def load_upload_config(
    config_path: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> UploadConfig:
    """Load upload configuration from YAML and apply environment overrides.

    Args:
        config_path: YAML file; the bundled ``config.yaml`` when omitted.
        env: Environment mapping, ``os.environ`` when omitted.

    Returns:
        Validated UploadConfig.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config is invalid.
    """
    env = os.environ if env is None else env
    config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    section = raw.get("upload", raw) if isinstance(raw, dict) else None
    if not isinstance(section, dict):
        raise ValueError("Invalid configuration file: 'upload' must be a mapping")

    try:
        config = UploadConfig(**section)
    except (TypeError, ValidationError) as e:
        raise ValueError(f"Invalid configuration file: {e}") from e

    folder_override = env.get(TARGET_FOLDER_ENV)
    if folder_override:
        config = config.model_copy(update={"target_folder_id": folder_override})
        logger.debug(f"Target folder overridden by {TARGET_FOLDER_ENV}")

    logger.info(f"Loaded upload configuration (mode={config.credential_mode})")
    return config
