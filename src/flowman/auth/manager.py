"""Authentication state: stored credentials checked against the Postman API."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Optional

from flowman.auth.api import PostmanClient, UserInfo
from flowman.auth.credentials import CredentialStore
from flowman.auth.validators import check_api_key, check_workspace_id
from flowman.errors import AuthenticationRequiredError, RemoteValidationError

logger = logging.getLogger(__name__)

MASK_CHAR = "*"
MASK_PLACEHOLDER = "****"
MASK_VISIBLE_START = 8
MASK_VISIBLE_END = 4


def mask_api_key(api_key: Optional[str]) -> str:
    """Mask an API key for display: first 8 and last 4 characters stay visible.

    Keys too short to keep anything hidden display as a fixed placeholder.
    """
    if not api_key or len(api_key) < MASK_VISIBLE_START + MASK_VISIBLE_END:
        return MASK_PLACEHOLDER

    start = api_key[:MASK_VISIBLE_START]
    end = api_key[-MASK_VISIBLE_END:]
    middle = MASK_CHAR * (len(api_key) - MASK_VISIBLE_START - MASK_VISIBLE_END)
    return f"{start}{middle}{end}"


@dataclass
class AuthStatus:
    """Snapshot of what is stored. The API key is masked."""

    authenticated: bool
    has_api_key: bool
    has_workspace: bool
    has_git_repo_path: bool
    api_key: Optional[str] = None
    workspace_id: Optional[str] = None
    git_repo_path: Optional[str] = None


class AuthManager:
    """
    Owns the authenticated / unauthenticated transition.

    A key is only left in the shell config file if the Postman API accepted
    it; failed attempts are rolled back.
    """

    def __init__(
        self,
        credentials: Optional[CredentialStore] = None,
        client_factory: Callable[[str], PostmanClient] = PostmanClient,
    ):
        self.credentials = credentials if credentials is not None else CredentialStore()
        self.client_factory = client_factory

    # =========================================================================
    # State
    # =========================================================================

    def is_authenticated(self) -> bool:
        return self.credentials.is_authenticated()

    def get_auth_status(self) -> AuthStatus:
        creds = self.credentials.get_all_credentials()
        git_repo_path = self.credentials.get_git_repo_path()
        return AuthStatus(
            authenticated=creds.authenticated,
            has_api_key=creds.api_key is not None,
            has_workspace=creds.workspace_id is not None,
            has_git_repo_path=git_repo_path is not None,
            api_key=mask_api_key(creds.api_key) if creds.api_key else None,
            workspace_id=creds.workspace_id,
            git_repo_path=git_repo_path,
        )

    def get_api_key(self) -> Optional[str]:
        return self.credentials.get_api_key()

    def get_masked_api_key(self) -> Optional[str]:
        api_key = self.credentials.get_api_key()
        return mask_api_key(api_key) if api_key else None

    def get_workspace_id(self) -> Optional[str]:
        return self.credentials.get_workspace_id()

    # =========================================================================
    # Transitions
    # =========================================================================

    def authenticate_with_api_key(self, api_key: str, workspace_id: Optional[str] = None) -> bool:
        """
        Store credentials, then check them against the Postman API.

        If the API rejects the key (or cannot be reached) the credentials just
        written are cleared again.

        Returns:
            True if the credentials are stored and valid
        """
        # Reject malformed input before anything is written
        for ok, message in (
            check_api_key(api_key),
            check_workspace_id(workspace_id) if workspace_id else (True, ""),
        ):
            if not ok:
                logger.error(message)
                return False

        if not self.credentials.store_credentials(api_key=api_key, workspace_id=workspace_id):
            logger.error("Failed to store credentials")
            self.credentials.clear_credentials()
            return False

        if not self.validate_credentials():
            logger.error("Invalid credentials provided")
            self.credentials.clear_credentials()
            return False

        logger.info("Authentication successful")
        return True

    def logout(self) -> bool:
        """Clear stored credentials. Succeeds even when nothing was stored."""
        cleared = self.credentials.clear_credentials()
        if cleared:
            logger.info("Logged out successfully")
        else:
            logger.info("No stored credentials, already logged out")
        return True

    def set_current_workspace(self, workspace_id: str) -> bool:
        return self.credentials.store_workspace_id(workspace_id)

    # =========================================================================
    # Remote validation
    # =========================================================================

    def validate_credentials(self) -> bool:
        """Check the stored API key against the Postman API. Never raises."""
        api_key = self.credentials.get_api_key()
        if not api_key:
            return False
        try:
            with self.client_factory(api_key) as client:
                return bool(client.validate_api_key())
        except (RemoteValidationError, OSError) as e:
            logger.debug(f"Credential validation failed: {e}")
            return False

    def check_credentials_health(self) -> bool:
        """Format check first, then the remote check."""
        if not self.is_authenticated():
            return False
        if not self.credentials.validate_stored_api_key():
            logger.warning("Stored API key format is invalid")
            return False
        return self.validate_credentials()

    def refresh_auth_status(self) -> bool:
        """Re-validate stored credentials and clear them if they are no longer valid."""
        is_valid = self.check_credentials_health()
        if not is_valid and self.is_authenticated():
            logger.warning("Stored credentials are no longer valid")
            self.credentials.clear_credentials()
        return is_valid

    def get_user_info(self) -> Optional[UserInfo]:
        api_key = self.credentials.get_api_key()
        if not api_key:
            return None
        with self.client_factory(api_key) as client:
            return client.get_user_info()

    # =========================================================================
    # Guards
    # =========================================================================

    def require_authentication(self) -> str:
        """Return the stored API key or raise AuthenticationRequiredError."""
        api_key = self.credentials.get_api_key()
        if not api_key:
            raise AuthenticationRequiredError(
                'Authentication required. Please run "flowman login" first.'
            )
        return api_key

    def get_auth_headers(self) -> dict[str, str]:
        return {
            "X-API-Key": self.require_authentication(),
            "Content-Type": "application/json",
        }
