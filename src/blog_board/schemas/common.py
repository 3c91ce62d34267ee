"""Shared validators for schema fields."""
from __future__ import annotations


def require_text(value: str) -> str:
    """Reject strings made only of whitespace."""
    if not value.strip():
        raise ValueError("must not be blank")
    return value
