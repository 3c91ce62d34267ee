"""Repository implementations behind the blog service."""

from .base import BlogRepository
from .memory import InMemoryBlogRepository
from .sql import SqlBlogRepository

__all__ = [
    "BlogRepository",
    "InMemoryBlogRepository",
    "SqlBlogRepository",
]
