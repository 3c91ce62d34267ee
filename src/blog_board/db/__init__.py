# src/blog_board/db/__init__.py
"""Database configuration and utilities."""

from .session import SessionLocal, session_scope

__all__ = ["session_scope", "SessionLocal"]
