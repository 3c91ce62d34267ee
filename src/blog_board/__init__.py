"""Blog board: posts, comments and tags over a relational schema."""

__version__ = "0.1.0"
