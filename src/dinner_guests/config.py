"""Configuration management for dinner-guests."""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Core settings for the enrichment core."""

    # Environment
    environment: str = Field(default="development", alias="DINNER_ENVIRONMENT")
    log_level: str = Field(default="INFO", alias="DINNER_LOG_LEVEL")

    # HTTP
    user_agent: str = Field(
        default="DinnerGuests/0.1 (biographical enrichment; read-only)",
        alias="DINNER_USER_AGENT",
    )
    request_timeout: float = Field(
        default=10.0,
        alias="DINNER_REQUEST_TIMEOUT",
        gt=0,
        description="Per-call HTTP timeout in seconds",
    )
    branch_timeout: Optional[float] = Field(
        default=20.0,
        alias="DINNER_BRANCH_TIMEOUT",
        description="Deadline for one aggregation branch in seconds (None disables it)",
    )

    # Source endpoints
    wikipedia_url: str = Field(
        default="https://en.wikipedia.org/w/api.php", alias="DINNER_WIKIPEDIA_URL"
    )
    wikiquote_url: str = Field(
        default="https://en.wikiquote.org/w/api.php", alias="DINNER_WIKIQUOTE_URL"
    )
    openlibrary_url: str = Field(
        default="https://openlibrary.org", alias="DINNER_OPENLIBRARY_URL"
    )
    gutendex_url: str = Field(default="https://gutendex.com", alias="DINNER_GUTENDEX_URL")

    # Fact extraction heuristics
    deceased_cutoff_year: int = Field(
        default=1900,
        alias="DINNER_DECEASED_CUTOFF_YEAR",
        description="Birth years before this are assumed deceased; after it, living",
    )
    intro_window: int = Field(
        default=300,
        alias="DINNER_INTRO_WINDOW",
        ge=1,
        description="Leading characters of a biography searched for lifespan spans",
    )
    max_plausible_bce_year: int = Field(default=3000, alias="DINNER_MAX_BCE_YEAR", ge=1)
    died_window: int = Field(
        default=80,
        alias="DINNER_DIED_WINDOW",
        ge=1,
        description="Characters after 'died' searched for a death year",
    )
    description_min_length: int = Field(default=20, alias="DINNER_DESCRIPTION_MIN_LENGTH")
    description_window: int = Field(default=150, alias="DINNER_DESCRIPTION_WINDOW")
    description_max_length: int = Field(default=100, alias="DINNER_DESCRIPTION_MAX_LENGTH")

    # Quotation source
    quote_min_length: int = Field(default=30, alias="DINNER_QUOTE_MIN_LENGTH", ge=0)
    quote_max_length: int = Field(default=500, alias="DINNER_QUOTE_MAX_LENGTH", ge=1)
    max_quotes: int = Field(default=5, alias="DINNER_MAX_QUOTES", ge=0)

    # Bibliography source
    works_fetch_limit: int = Field(default=10, alias="DINNER_WORKS_FETCH_LIMIT", ge=1)
    max_works: int = Field(default=5, alias="DINNER_MAX_WORKS", ge=0)

    # Full text source
    fulltext_candidates: int = Field(default=3, alias="DINNER_FULLTEXT_CANDIDATES", ge=1)
    excerpt_window: int = Field(default=3000, alias="DINNER_EXCERPT_WINDOW", ge=1)
    paragraph_min_length: int = Field(default=50, alias="DINNER_PARAGRAPH_MIN_LENGTH")
    paragraph_max_length: int = Field(default=500, alias="DINNER_PARAGRAPH_MAX_LENGTH")
    excerpt_max_paragraphs: int = Field(default=3, alias="DINNER_EXCERPT_MAX_PARAGRAPHS", ge=1)

    # Autocomplete
    suggestion_fetch_limit: int = Field(default=15, alias="DINNER_SUGGESTION_FETCH_LIMIT", ge=1)
    suggestion_limit: int = Field(default=8, alias="DINNER_SUGGESTION_LIMIT", ge=1)
    suggestion_snippet_length: int = Field(default=100, alias="DINNER_SUGGESTION_SNIPPET_LENGTH")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Normalize the log level name."""
        return v.upper()

    @field_validator("branch_timeout", mode="before")
    @classmethod
    def parse_branch_timeout(cls, v):
        """Treat empty strings and non-positive values as 'no deadline'."""
        if v in ("", None):
            return None
        if float(v) <= 0:
            return None
        return v

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


# Global settings instance - lazy loaded
_settings_instance = None


def get_settings() -> Settings:
    """Get the global settings instance, creating it if necessary."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance


def reset_settings() -> None:
    """Reset the global settings instance to force reload from environment."""
    global _settings_instance
    _settings_instance = None
