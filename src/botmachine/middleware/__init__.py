"""
Middleware components for botmachine.
"""

from .session import SessionMiddleware, session

__all__ = [
    "SessionMiddleware",
    "session",
]
