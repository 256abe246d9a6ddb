"""Credential storage for Postman authentication.

Credentials are environment variables persisted in the user's shell config
file, so they are also available to other tools started from that shell.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from flowman.auth.validators import check_api_key, check_repo_path, check_workspace_id
from flowman.shell.config_file import ConfigFileStore

logger = logging.getLogger(__name__)


@dataclass
class StoredCredentials:
    """Credentials as currently stored. Absent values are None."""

    api_key: Optional[str] = None
    workspace_id: Optional[str] = None

    @property
    def authenticated(self) -> bool:
        return self.api_key is not None


class CredentialStore:
    """Typed access to the Postman credentials kept in the shell config file."""

    API_KEY_VAR = "POSTMAN_API_KEY"
    WORKSPACE_ID_VAR = "POSTMAN_WORKSPACE_ID"
    GIT_REPO_PATH_VAR = "FLOWMAN_GIT_REPO_PATH"

    API_KEY_COMMENT = "Postman API Key for flowman"
    WORKSPACE_ID_COMMENT = "Postman Workspace ID for flowman"
    GIT_REPO_PATH_COMMENT = "Git repository synced by flowman"

    def __init__(self, store: Optional[ConfigFileStore] = None):
        self.store = store if store is not None else ConfigFileStore()

    # =========================================================================
    # API key
    # =========================================================================

    def store_api_key(self, api_key: str) -> bool:
        """Validate and persist the API key. Invalid keys are never written."""
        ok, message = check_api_key(api_key)
        if not ok:
            logger.error(message)
            return False

        success = self.store.write(self.API_KEY_VAR, api_key, comment=self.API_KEY_COMMENT)
        if success:
            logger.info("Postman API key stored successfully")
        return success

    def get_api_key(self) -> Optional[str]:
        return self.store.read(self.API_KEY_VAR)

    def has_api_key(self) -> bool:
        return self.store.exists(self.API_KEY_VAR)

    # =========================================================================
    # Workspace ID
    # =========================================================================

    def store_workspace_id(self, workspace_id: str) -> bool:
        """Validate and persist the workspace ID. Invalid IDs are never written."""
        ok, message = check_workspace_id(workspace_id)
        if not ok:
            logger.error(message)
            return False

        success = self.store.write(
            self.WORKSPACE_ID_VAR, workspace_id, comment=self.WORKSPACE_ID_COMMENT
        )
        if success:
            logger.info("Postman workspace ID stored successfully")
        return success

    def get_workspace_id(self) -> Optional[str]:
        return self.store.read(self.WORKSPACE_ID_VAR)

    def has_workspace_id(self) -> bool:
        return self.store.exists(self.WORKSPACE_ID_VAR)

    # =========================================================================
    # Git repository
    # =========================================================================

    def store_git_repo_path(self, repo_path: str | Path) -> bool:
        """Persist the absolute path of the git repository to sync collections into."""
        ok, message = check_repo_path(repo_path)
        if not ok:
            logger.error(message)
            return False

        resolved = str(Path(repo_path).expanduser().resolve())
        return self.store.write(
            self.GIT_REPO_PATH_VAR, resolved, comment=self.GIT_REPO_PATH_COMMENT
        )

    def get_git_repo_path(self) -> Optional[str]:
        return self.store.read(self.GIT_REPO_PATH_VAR)

    # =========================================================================
    # Combined
    # =========================================================================

    def store_credentials(
        self, api_key: Optional[str] = None, workspace_id: Optional[str] = None
    ) -> bool:
        """Store whichever credentials are given. True only if all of them were stored."""
        success = True
        if api_key:
            success = self.store_api_key(api_key) and success
        if workspace_id:
            success = self.store_workspace_id(workspace_id) and success
        return success

    def get_all_credentials(self) -> StoredCredentials:
        return StoredCredentials(
            api_key=self.get_api_key(),
            workspace_id=self.get_workspace_id(),
        )

    def is_authenticated(self) -> bool:
        return self.get_all_credentials().authenticated

    def clear_credentials(self) -> bool:
        """
        Remove the API key and workspace ID.

        Returns:
            True if at least one of them was removed, False if nothing was stored
        """
        api_key_removed = self.store.remove(self.API_KEY_VAR)
        workspace_id_removed = self.store.remove(self.WORKSPACE_ID_VAR)

        if api_key_removed and workspace_id_removed:
            logger.info("All credentials cleared successfully")
        elif api_key_removed or workspace_id_removed:
            logger.info("Some credentials cleared successfully")
        else:
            logger.info("No credentials found to clear")
        return api_key_removed or workspace_id_removed

    def validate_stored_api_key(self) -> bool:
        api_key = self.get_api_key()
        return check_api_key(api_key)[0] if api_key else False

    def validate_stored_workspace_id(self) -> bool:
        workspace_id = self.get_workspace_id()
        return check_workspace_id(workspace_id)[0] if workspace_id else False
