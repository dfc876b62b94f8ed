from pydantic_settings import BaseSettings
from typing import List


class ConfigurationError(RuntimeError):
    """Raised when a required setting is missing at startup."""


class Settings(BaseSettings):
    # API keys
    OPENAI_API_KEY: str = ""
    ANTHROPIC_API_KEY: str = ""
    PINECONE_API_KEY: str = ""

    # Server
    PORT: int = 4000
    CORS_ORIGINS: List[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    # Vector index (provisioned externally, see scripts/setup_pinecone.py)
    PINECONE_INDEX: str = "perigon-coding-guidelines"
    PINECONE_CLOUD: str = "aws"
    PINECONE_REGION: str = "us-east-1"

    # Embeddings (text-embedding-3-small produces 1536-dimensional vectors)
    EMBEDDING_MODEL: str = "text-embedding-3-small"
    EMBEDDING_DIMENSION: int = 1536

    # Generation
    ANTHROPIC_MODEL: str = "claude-sonnet-4-20250514"
    GENERATION_MAX_TOKENS: int = 5000
    GENERATION_TEMPERATURE: float = 0.1

    # Vectorization
    DOCS_DIR: str = "docs"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    def require(self, *names: str) -> None:
        """Fail fast when any of the named settings is empty."""
        for name in names:
            if not getattr(self, name):
                raise ConfigurationError(f"{name} environment variable is required")


settings = Settings()
