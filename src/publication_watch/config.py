"""Application configuration."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

from publication_watch.constants import (
    DEFAULT_ORCID_ID,
    DEFAULT_PUBLICATIONS_FILE,
    DEFAULT_PUBMED_AUTHOR,
    DEFAULT_TIMEOUT,
    PUBMED_MAX_RESULTS,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Dataset
    publications_file: Path = DEFAULT_PUBLICATIONS_FILE

    # Upstream sources
    orcid_id: str = DEFAULT_ORCID_ID
    pubmed_author: str = DEFAULT_PUBMED_AUTHOR
    pubmed_max_results: int = PUBMED_MAX_RESULTS
    ncbi_api_key: str = ""

    # Review-request sink (GitHub issues)
    github_token: str = ""
    github_repository: str = ""
    github_output: str = ""

    # App Settings
    request_timeout: float = DEFAULT_TIMEOUT
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        frozen = True

    @property
    def review_sink_configured(self) -> bool:
        return bool(self.github_token.strip() and self.github_repository.strip())


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
