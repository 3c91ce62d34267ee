"""Application settings and configuration.

This module defines all configuration options for the blog board.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Database configuration
    database_url: str = Field(default="sqlite:///./blog.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Field-level constraints enforced by the domain service
    post_title_max_length: int = Field(default=1024, ge=1, alias="POST_TITLE_MAX_LENGTH")
    tag_name_max_length: int = Field(default=255, ge=1, alias="TAG_NAME_MAX_LENGTH")

    # When enabled, no two post details may share the same author.
    unique_detail_author: bool = Field(default=False, alias="UNIQUE_DETAIL_AUTHOR")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides.

        Returns:
            The active database URL (test database if in testing mode, otherwise production)
        """
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


settings = Settings()
