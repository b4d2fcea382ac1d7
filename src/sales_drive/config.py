"""Application configuration loaded from environment variables."""

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class AppConfig:
    """Centralized application configuration.

    Required fields have no defaults and will cause a KeyError at startup
    if the corresponding environment variable is missing. Operational
    constants have defaults but can be overridden via environment variables.
    """

    # Required — no defaults, fail at startup if missing
    client_id: str
    client_secret: str
    tenant_id: str
    drive_user: str
    root_folder_id: str

    # Operational constants — defaults provided, overridable via env
    application_name: str = "sales-drive"
    http_timeout_seconds: float = 60.0
    conflict_behavior: str = "rename"


def resolve_client_secret() -> str:
    """Resolve the Azure AD client secret from the environment.

    Sources are tried in order:
        1. SD_CLIENT_SECRET holding the secret itself.
        2. SD_CLIENT_SECRET_FILE naming a file whose stripped contents are the secret
           (mounted secret volumes, local development).

    Returns:
        The client secret string.

    Raises:
        KeyError: If neither source is configured or the secret file is empty.
    """
    secret = os.environ.get("SD_CLIENT_SECRET", "")
    if secret:
        return secret

    secret_file = os.environ.get("SD_CLIENT_SECRET_FILE", "")
    if secret_file:
        secret = Path(secret_file).read_text(encoding="utf-8").strip()
        if secret:
            return secret
        raise KeyError(f"SD_CLIENT_SECRET_FILE points to an empty file: {secret_file}")

    raise KeyError(
        "Client secret not found: set SD_CLIENT_SECRET or SD_CLIENT_SECRET_FILE"
    )


def load_config() -> AppConfig:
    """Construct an AppConfig from environment variables.

    Required environment variables:
        SD_CLIENT_ID: Azure AD application (client) ID.
        SD_CLIENT_SECRET or SD_CLIENT_SECRET_FILE: client secret, see resolve_client_secret().
        SD_TENANT_ID: Azure AD tenant ID.
        SD_DRIVE_USER: UPN or object ID of the OneDrive user that owns the sales folders.
        SD_ROOT_FOLDER_ID: Drive item ID of the folder uploads are organized under.

    Optional environment variables (with defaults):
        SD_APPLICATION_NAME: Sent as the User-Agent of every Graph request (default: sales-drive).
        SD_HTTP_TIMEOUT_SECONDS: Connect/read timeout per Graph request (default: 60).
        SD_CONFLICT_BEHAVIOR: Graph name conflict behavior for creates (default: rename).

    Returns:
        Configured AppConfig instance.
    """
    return AppConfig(
        client_id=os.environ["SD_CLIENT_ID"],
        client_secret=resolve_client_secret(),
        tenant_id=os.environ["SD_TENANT_ID"],
        drive_user=os.environ["SD_DRIVE_USER"],
        root_folder_id=os.environ["SD_ROOT_FOLDER_ID"],
        application_name=os.environ.get("SD_APPLICATION_NAME", "sales-drive"),
        http_timeout_seconds=float(os.environ.get("SD_HTTP_TIMEOUT_SECONDS", "60")),
        conflict_behavior=os.environ.get("SD_CONFLICT_BEHAVIOR", "rename"),
    )
