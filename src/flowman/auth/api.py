"""
Postman API client.

Covers the handful of endpoints flowman needs: validating an API key, the
current user, workspaces and collections.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from flowman.config import load_config
from flowman.errors import RemoteValidationError

logger = logging.getLogger(__name__)


class PostmanError(RemoteValidationError):
    """Base exception for Postman API errors."""

    pass


class PostmanAuthError(PostmanError):
    """Authentication error (invalid or revoked API key)."""

    pass


class PostmanConnectionError(PostmanError):
    """The Postman API could not be reached."""

    pass


@dataclass
class UserInfo:
    """Authenticated Postman user."""

    id: Optional[str] = None
    username: Optional[str] = None
    full_name: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "UserInfo":
        user_id = data.get("id")
        return cls(
            id=str(user_id) if user_id is not None else None,
            username=data.get("username"),
            full_name=data.get("fullName"),
            email=data.get("email"),
        )


@dataclass
class Workspace:
    id: str
    name: str
    type: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Workspace":
        return cls(id=data["id"], name=data.get("name", ""), type=data.get("type"))


@dataclass
class Collection:
    id: str
    name: str
    uid: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Collection":
        return cls(id=data["id"], name=data.get("name", ""), uid=data.get("uid"))


class PostmanClient:
    """
    Low-level Postman API client.

    Usage:
        with PostmanClient(api_key="PMAK-...") as client:
            if client.validate_api_key():
                workspaces = client.list_workspaces()
    """

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        timeout: float | None = None,
    ):
        """
        Args:
            api_key: Postman API key
            base_url: API base URL (defaults to FLOWMAN_API_URL or the public API)
            timeout: Request timeout in seconds (defaults to FLOWMAN_TIMEOUT or 10)
        """
        config = load_config()
        self.api_key = api_key
        self.base_url = (base_url or config.API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else config.TIMEOUT
        self._client: httpx.Client | None = None

    @property
    def client(self) -> httpx.Client:
        """Lazy-initialized httpx client."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                headers={
                    "X-API-Key": self.api_key,
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
        return self._client

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "PostmanClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """GET a JSON document, translating failures into PostmanError subclasses."""
        try:
            response = self.client.get(path, params=params)
        except httpx.RequestError as e:
            raise PostmanConnectionError(f"Unable to reach Postman API: {e}") from e

        if response.status_code in (401, 403):
            raise PostmanAuthError("Invalid Postman API key")
        if response.status_code != 200:
            raise PostmanError(
                f"Postman API error {response.status_code}: {_error_message(response)}"
            )
        try:
            data = response.json()
        except ValueError as e:
            raise PostmanError(f"Invalid JSON from Postman API: {e}") from e
        if not isinstance(data, dict):
            raise PostmanError("Unexpected response from Postman API")
        return data

    # =========================================================================
    # Account
    # =========================================================================

    def validate_api_key(self) -> bool:
        """True if the API returns a user for this key."""
        try:
            data = self._get("/me")
        except PostmanError as e:
            logger.debug(f"API key validation failed: {e}")
            return False
        return bool(data.get("user"))

    def get_user_info(self) -> UserInfo | None:
        try:
            data = self._get("/me")
        except PostmanError as e:
            logger.error(f"Failed to get user info: {e}")
            return None
        user = data.get("user")
        return UserInfo.from_dict(user) if user else None

    def test_connectivity(self) -> bool:
        """Check the API is reachable with this key, logging why if not."""
        try:
            self._get("/me")
            return True
        except PostmanConnectionError:
            logger.error("Unable to connect to Postman API. Check your internet connection.")
        except PostmanAuthError:
            logger.error("Invalid API key.")
        except PostmanError as e:
            logger.error(f"API connectivity test failed: {e}")
        return False

    # =========================================================================
    # Workspaces & collections
    # =========================================================================

    def list_workspaces(self) -> list[Workspace]:
        try:
            data = self._get("/workspaces")
        except PostmanError as e:
            logger.error(f"Failed to get workspaces: {e}")
            return []
        return [Workspace.from_dict(ws) for ws in data.get("workspaces") or []]

    def get_workspace(self, workspace_id: str) -> Workspace | None:
        try:
            data = self._get(f"/workspaces/{workspace_id}")
        except PostmanError as e:
            logger.error(f"Failed to get workspace: {e}")
            return None
        workspace = data.get("workspace")
        return Workspace.from_dict(workspace) if workspace else None

    def list_collections(self, workspace_id: str | None = None) -> list[Collection]:
        params = {"workspace": workspace_id} if workspace_id else None
        try:
            data = self._get("/collections", params=params)
        except PostmanError as e:
            logger.error(f"Failed to get collections: {e}")
            return []
        return [Collection.from_dict(c) for c in data.get("collections") or []]


def _error_message(response: httpx.Response) -> str:
    """Pull the error message out of a Postman error body, if there is one."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    error = body.get("error") if isinstance(body, dict) else None
    if not error:
        return response.text[:200] or "unknown error"
    if isinstance(error, dict):
        return error.get("message") or error.get("name") or "unknown error"
    return str(error)
