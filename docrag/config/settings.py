"""Configuration management for docrag."""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _sanitize_value(value: str) -> str:
    """Remove BOM characters and whitespace from string settings.

    Values copied from editors or secret managers sometimes carry a BOM
    that breaks file paths and model names.
    """
    if not value:
        return value
    return value.lstrip("\ufeff").strip()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Data directories
    data_dir: Path = Path("./data")
    vector_store_file: str = "vectors.json"
    strict_persistence: bool = False

    # Embedding settings
    embedding_mode: Literal["auto", "model", "fallback"] = "auto"
    embedding_model: str = "all-MiniLM-L6-v2"
    embedding_dimension: int = Field(default=384, gt=0)

    @field_validator("embedding_model", "vector_store_file", mode="after")
    @classmethod
    def sanitize_strings(cls, value: str) -> str:
        """Remove BOM and whitespace from string values."""
        return _sanitize_value(value)

    @field_validator("embedding_mode", mode="before")
    @classmethod
    def sanitize_mode(cls, value: object) -> object:
        """Strip BOM and whitespace before the value is checked against the modes."""
        if isinstance(value, str):
            return _sanitize_value(value)
        return value

    # RAG settings
    chunk_size: int = Field(default=1000, gt=0)
    chunk_overlap: int = Field(default=200, ge=0)
    min_chunk_length: int = Field(default=50, ge=0)
    top_k_results: int = Field(default=5, ge=1)
    similarity_threshold: float = Field(default=0.3, ge=0.0, le=1.0)
    include_context: bool = True
    summary_max_length: int = Field(default=500, gt=0)
    max_steps: int = Field(default=10, ge=1)

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    @property
    def vector_store_path(self) -> Path:
        """Snapshot file for the JSON vector store."""
        return self.data_dir / self.vector_store_file

    def ensure_directories(self) -> None:
        """Create all required directories if they don't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)


# Global settings instance
settings = Settings()
