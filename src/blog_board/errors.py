"""Error kinds raised by the blog domain service and its repositories.

Every service operation either succeeds or raises exactly one of
:class:`NotFoundError`, :class:`ValidationError` or :class:`ConflictError`.
"""

from __future__ import annotations

from typing import Any

__all__ = ["BlogError", "NotFoundError", "ValidationError", "ConflictError"]


class BlogError(RuntimeError):
    """Base exception raised for blog domain failures.

    This is the base class for all blog-related exceptions.
    """


class NotFoundError(BlogError):
    """Raised when a referenced entity does not exist.

    Attributes:
        entity: Kind of entity that was looked up (``"post"``, ``"comment"``, ``"tag"``).
        key: Identifier or name used for the lookup.
    """

    def __init__(self, entity: str, key: Any) -> None:
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} {key!r} not found")


class ValidationError(BlogError):
    """Raised when input fails a field-level constraint."""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"{field}: {message}")


class ConflictError(BlogError):
    """Raised when a uniqueness or concurrent-modification constraint is violated."""
