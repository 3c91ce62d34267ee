"""detail author unique index

Revision ID: 8e3f61a4c0d2
Revises: 5c1d0e7a2b94
Create Date: 2026-10-19 14:03:27.118904

"""
from __future__ import annotations

from typing import Sequence, Union

from alembic import op

from blog_board.core.settings import settings
from blog_board.db.session import DETAIL_AUTHOR_INDEX

# revision identifiers, used by Alembic.
revision: str = "8e3f61a4c0d2"
down_revision: Union[str, Sequence[str], None] = "5c1d0e7a2b94"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Enforce unique post_detail.created_by when UNIQUE_DETAIL_AUTHOR is set."""
    if settings.unique_detail_author:
        op.create_index(DETAIL_AUTHOR_INDEX, "post_detail", ["created_by"], unique=True)


def downgrade() -> None:
    """Drop the created_by index if the upgrade created it."""
    op.execute(f"DROP INDEX IF EXISTS {DETAIL_AUTHOR_INDEX}")
