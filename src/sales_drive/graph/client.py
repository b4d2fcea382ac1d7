"""Microsoft Graph API client with MSAL authentication."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any
from urllib import request as urllib_request
from urllib.error import HTTPError

import msal

if TYPE_CHECKING:
    from sales_drive.config import AppConfig

logger = logging.getLogger(__name__)

GRAPH_BASE_URL = "https://graph.microsoft.com/v1.0"
GRAPH_SCOPES = ["https://graph.microsoft.com/.default"]
AUTHORITY_BASE_URL = "https://login.microsoftonline.com"
DEFAULT_TIMEOUT_SECONDS = 60.0


class GraphAuthError(Exception):
    """Raised when MSAL token acquisition fails."""


class GraphApiError(Exception):
    """Raised when the Graph API returns a non-2xx response."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"Graph API error {status_code}: {message}")
        self.status_code = status_code
        self.message = message


class GraphClient:
    """Authenticated client for Microsoft Graph API.

    Every request is bound by the same connect/read timeout. Requests are
    never retried here; a failed call propagates to the caller.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        tenant_id: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str | None = None,
    ) -> None:
        """Initialise the MSAL confidential client application.

        Args:
            client_id: Azure AD application (client) ID.
            client_secret: Azure AD application client secret.
            tenant_id: Azure AD tenant ID.
            timeout: Connect/read timeout in seconds applied to every request.
            user_agent: Optional User-Agent header value.
        """
        authority = f"{AUTHORITY_BASE_URL}/{tenant_id}"
        self._app = msal.ConfidentialClientApplication(
            client_id=client_id,
            client_credential=client_secret,
            authority=authority,
        )
        self._timeout = timeout
        self._user_agent = user_agent

    def _acquire_token(self) -> str:
        """Acquire a Bearer token using client credentials flow.

        Returns:
            Access token string.

        Raises:
            GraphAuthError: If MSAL cannot acquire a token.
        """
        result: dict[str, Any] = self._app.acquire_token_for_client(scopes=GRAPH_SCOPES) or {}
        if "access_token" not in result:
            error = result.get("error", "unknown_error")
            description = result.get("error_description", "No description provided")
            logger.error("[_acquire_token] MSAL token acquisition failed; error:%s", error)
            raise GraphAuthError(f"Token acquisition failed: {error}: {description}")
        return str(result["access_token"])

    def _request(
        self,
        method: str,
        path: str,
        data: bytes | None = None,
        content_type: str | None = None,
        accept: str = "application/json",
    ) -> bytes:
        """Send an authenticated request and return the raw response body.

        Raises:
            GraphAuthError: If token acquisition fails.
            GraphApiError: If the API returns a non-2xx status code.
        """
        token = self._acquire_token()
        headers = {
            "Authorization": f"Bearer {token}",
            "Accept": accept,
        }
        if content_type is not None:
            headers["Content-Type"] = content_type
        if self._user_agent:
            headers["User-Agent"] = self._user_agent

        req = urllib_request.Request(
            f"{GRAPH_BASE_URL}{path}",
            data=data,
            headers=headers,
            method=method,
        )
        try:
            with urllib_request.urlopen(req, timeout=self._timeout) as resp:
                return resp.read()  # type: ignore[no-any-return]
        except HTTPError as exc:
            raw = exc.read()
            try:
                detail = json.loads(raw).get("error", {}).get("message", exc.reason)
            except Exception:
                detail = exc.reason
            logger.warning(
                "[_request] graph call failed; method:%s;path:%s;status:%d",
                method,
                path,
                exc.code,
            )
            raise GraphApiError(exc.code, detail) from exc

    def _send_json(self, method: str, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        body = self._request(
            method,
            path,
            data=json.dumps(payload).encode("utf-8"),
            content_type="application/json",
        )
        return json.loads(body) if body else {}  # type: ignore[no-any-return]

    def get(self, path: str) -> dict[str, Any]:
        """Perform an authenticated GET request to the Graph API.

        Args:
            path: URL path relative to GRAPH_BASE_URL (must start with '/').

        Returns:
            Parsed JSON response body as a dict.

        Raises:
            GraphAuthError: If token acquisition fails.
            GraphApiError: If the API returns a non-2xx status code.
        """
        body = self._request("GET", path)
        return json.loads(body)  # type: ignore[no-any-return]

    def get_content(self, path: str) -> bytes:
        """Download raw bytes, following the redirect Graph issues for /content.

        Args:
            path: URL path relative to GRAPH_BASE_URL (must start with '/').

        Returns:
            Response body bytes.
        """
        return self._request("GET", path, accept="*/*")

    def post_json(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        """POST a JSON payload and return the parsed response body."""
        return self._send_json("POST", path, payload)

    def patch_json(self, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        """PATCH a JSON payload and return the parsed response body."""
        return self._send_json("PATCH", path, payload)

    def put_content(
        self,
        path: str,
        content: bytes,
        content_type: str = "application/octet-stream",
    ) -> dict[str, Any]:
        """Upload raw bytes with an authenticated PUT request.

        Args:
            path: URL path relative to GRAPH_BASE_URL (must start with '/').
            content: Raw bytes to upload.
            content_type: MIME type for the Content-Type header.

        Returns:
            Parsed JSON response body (the created or replaced drive item).
        """
        body = self._request("PUT", path, data=content, content_type=content_type)
        return json.loads(body) if body else {}  # type: ignore[no-any-return]

    def delete(self, path: str) -> None:
        """Perform an authenticated DELETE request."""
        self._request("DELETE", path)


def graph_client_from_config(config: AppConfig) -> GraphClient:
    """Construct a GraphClient from application configuration.

    Args:
        config: Application configuration instance.

    Returns:
        Configured GraphClient instance.
    """
    return GraphClient(
        client_id=config.client_id,
        client_secret=config.client_secret,
        tenant_id=config.tenant_id,
        timeout=config.http_timeout_seconds,
        user_agent=config.application_name,
    )
