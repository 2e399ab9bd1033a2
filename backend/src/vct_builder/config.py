"""Application configuration via pydantic-settings."""

from functools import lru_cache

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Settings
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    # CORS - comma-separated origins (env var: CORS_ORIGINS)
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"

    @computed_field
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins as a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # AWS / Bedrock. Empty credentials fall back to the default boto3 chain.
    aws_region: str = "us-west-2"
    aws_access_key_id: str = ""
    aws_secret_access_key: str = ""
    aws_session_token: str = ""

    bedrock_model_id: str = "amazon.titan-text-express-v1"
    bedrock_max_tokens: int = 2048
    bedrock_temperature: float = 0.3
    bedrock_connect_timeout: float = 10.0
    bedrock_read_timeout: float = 60.0
    stream_chunk_size: int = 4096

    # Roster validation
    max_roster_size: int = 5

    # News feed (VLR-style JSON API)
    news_api_url: str = "https://vlrggapi.vercel.app/news"
    news_timeout: float = 10.0
    use_mock_news: bool = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()
