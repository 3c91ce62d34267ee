"""Unit tests for the ORM models defined in blog_board.models.

These tests verify basic mapping correctness: table names, key and unique
constraints, cascade rules on foreign keys, and the optimistic version column.
"""

from sqlalchemy import UniqueConstraint
from sqlalchemy.orm import attributes

from blog_board.db.session import Base
from blog_board.models import Post, PostComment, PostDetail, PostTag, Tag


def test_table_names():
    """Model classes expose expected __tablename__ values."""
    assert Post.__tablename__ == "post"
    assert PostDetail.__tablename__ == "post_detail"
    assert PostComment.__tablename__ == "post_comment"
    assert Tag.__tablename__ == "tag"
    assert PostTag.__tablename__ == "post_tag"
    assert set(Base.metadata.tables) == {"post", "post_detail", "post_comment", "tag", "post_tag"}


def test_post_detail_is_keyed_by_post():
    """The detail shares its primary key with the post it belongs to."""
    table = PostDetail.__table__
    assert {c.name for c in table.primary_key} == {"post_id"}
    assert not table.c.created_by.nullable
    assert table.c.created_on.type.timezone is True


def test_foreign_keys_cascade_on_delete():
    """Every child row goes away with the row it references."""
    expected = {
        ("post_detail", "post_id"): "post.id",
        ("post_comment", "post_id"): "post.id",
        ("post_tag", "post_id"): "post.id",
        ("post_tag", "tag_id"): "tag.id",
    }
    for (table_name, column_name), target in expected.items():
        (fk,) = Base.metadata.tables[table_name].c[column_name].foreign_keys
        assert fk.target_fullname == target
        assert fk.ondelete == "CASCADE"


def test_unique_constraints():
    """Tag names and post/tag pairs are unique."""
    assert Tag.__table__.c.name.unique
    pairs = [
        tuple(c.name for c in constraint.columns)
        for constraint in PostTag.__table__.constraints
        if isinstance(constraint, UniqueConstraint)
    ]
    assert ("post_id", "tag_id") in pairs


def test_post_title_column():
    column = Post.__table__.c.title
    assert column.type.length == 1024
    assert not column.nullable


def test_version_column_is_configured():
    assert Post.__mapper__.version_id_col is Post.__table__.c.version


def test_relationships_are_instrumented_attributes():
    rel_attrs = [
        Post.detail,
        Post.comments,
        Post.tag_links,
        PostDetail.post,
        PostComment.post,
        Tag.post_links,
        PostTag.post,
        PostTag.tag,
    ]
    for a in rel_attrs:
        assert isinstance(a, attributes.InstrumentedAttribute)
