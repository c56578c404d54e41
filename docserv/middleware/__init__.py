"""ASGI middleware for the docserv application.

This module provides:
- Rejection of path traversal attempts
"""

from .path_guard import PathGuardMiddleware

__all__ = [
    "PathGuardMiddleware",
]
