"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # PostgreSQL
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "hireboard_user"
    postgres_password: str = "password"
    postgres_db: str = "hireboard_db"

    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "hireboard_docs"

    # JWT verification (tokens are issued by the auth service)
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"

    # App
    debug: bool = True
    log_level: str = "INFO"

    # ATS ranking
    ats_rank_limit: int = 50          # 0 = return every candidate
    ats_max_workers: int = 1          # 1 = score resumes sequentially
    ats_taxonomy_ttl_seconds: int = 300

    # Job profile weighting
    ats_explicit_skill_weight: float = 1.0
    ats_preferred_skill_weight: float = 0.75
    ats_description_skill_weight: float = 0.5
    ats_neutral_skill_coverage: float = 0.5

    # Scoring weights (core weights must sum to 1.0)
    ats_weight_skill_coverage: float = 0.45
    ats_weight_text_similarity: float = 0.20
    ats_weight_format: float = 0.10
    ats_weight_presence: float = 0.10
    ats_weight_impact: float = 0.15
    ats_cert_bonus_weight: float = 0.05
    ats_tool_bonus_weight: float = 0.05

    @property
    def postgres_url(self) -> str:
        """Construct PostgreSQL connection URL"""
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
