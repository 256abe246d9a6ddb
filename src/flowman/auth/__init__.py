"""Postman authentication.

Public API:
- CredentialStore, StoredCredentials: credentials persisted in the shell config file
- PostmanClient: Postman API client (validation, user info, workspaces, collections)
- AuthManager, AuthStatus, mask_api_key: authentication state and display helpers
- validators: API key / workspace ID format checks
"""

from flowman.auth.api import (
    Collection,
    PostmanAuthError,
    PostmanClient,
    PostmanConnectionError,
    PostmanError,
    UserInfo,
    Workspace,
)
from flowman.auth.credentials import CredentialStore, StoredCredentials
from flowman.auth.manager import AuthManager, AuthStatus, mask_api_key
from flowman.auth.validators import (
    check_api_key,
    check_workspace_id,
    is_valid_api_key,
    is_valid_workspace_id,
)

__all__ = [
    # Credentials
    "CredentialStore",
    "StoredCredentials",
    # API client
    "PostmanClient",
    "PostmanError",
    "PostmanAuthError",
    "PostmanConnectionError",
    "UserInfo",
    "Workspace",
    "Collection",
    # Auth state
    "AuthManager",
    "AuthStatus",
    "mask_api_key",
    # Validators
    "check_api_key",
    "check_workspace_id",
    "is_valid_api_key",
    "is_valid_workspace_id",
]
