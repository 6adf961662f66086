"""Application configuration — loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic import PositiveInt, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from repo_ranker.domain.entities import RetrievalStrategy


class Settings(BaseSettings):
    """Central configuration loaded from env vars (or ``.env`` file)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    github_token: SecretStr | None = None
    # OAuth app credentials raise the unauthenticated rate limit
    github_client_id: str | None = None
    github_client_secret: SecretStr | None = None
    github_api_url: str = "https://api.github.com"
    github_graphql_url: str = "https://api.github.com/graphql"
    fill_prs_concurrency: PositiveInt = 10
    retrieval_strategy: RetrievalStrategy = RetrievalStrategy.REST
    request_timeout: float = 30.0
    http_retries: int = 0
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    @model_validator(mode="after")
    def _client_credentials_paired(self) -> Settings:
        if (self.github_client_id is None) != (self.github_client_secret is None):
            msg = "Either none or both of GITHUB_CLIENT_ID and GITHUB_CLIENT_SECRET must be set."
            raise ValueError(msg)
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton application settings (cached after first call)."""
    return Settings()
