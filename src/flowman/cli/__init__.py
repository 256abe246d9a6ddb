"""flowman CLI - Command-line interface layer.

This module provides:
- main: Entry point and lazy command registration
- common: Shared console, auth helpers and option validators
- login, logout, status, workspace, collection, git: Commands
"""
