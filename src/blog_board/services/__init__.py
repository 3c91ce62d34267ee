# src/blog_board/services/__init__.py
"""Business logic services for the blog board."""

from .blog_service import BlogService, get_blog_service, open_blog_service

__all__ = [
    "BlogService",
    "get_blog_service",
    "open_blog_service",
]
