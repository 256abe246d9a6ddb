"""flowman - Postman authentication and workspace CLI.

This module provides:
- Shell: shell detection and persistent environment variables in shell config files
- Auth: credential storage, Postman API client, authentication state
- CLI: click commands (login, logout, status, workspace, collection, git)
"""

__version__ = "0.1.0"
