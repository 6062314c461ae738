"""Configuration management for resumebind."""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


def _parse_cors_origins() -> list[str]:
    """Parse CORS origins from environment variable."""
    cors_env = os.getenv("CORS_ALLOW_ORIGINS")
    if cors_env:
        return cors_env.split(",")
    return ["*"]


def _parse_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


class Settings(BaseModel):
    """Application settings."""

    # Database path for binding persistence
    database_path: Path = Path(os.getenv("DATABASE_PATH", "data/resumebind.db"))

    # Server settings
    host: str = os.getenv("HOST", "127.0.0.1")
    port: int = int(os.getenv("PORT", "8000"))
    debug: bool = _parse_bool("DEBUG")

    # CORS settings (comma-separated list of allowed origins, or * for all)
    cors_allow_origins: list[str] = _parse_cors_origins()

    # Matching - minimum confidence for a placeholder to receive a suggestion
    match_threshold: float = float(os.getenv("MATCH_THRESHOLD", "0.4"))

    # Prefix nested field paths with their parent path when flattening
    qualify_field_paths: bool = _parse_bool("QUALIFY_FIELD_PATHS")

    # Review - "accept all high confidence" cut-off
    high_confidence_threshold: float = float(os.getenv("HIGH_CONFIDENCE_THRESHOLD", "0.5"))
    suggestion_limit: int = int(os.getenv("SUGGESTION_LIMIT", "5"))
    review_ttl_seconds: int = int(os.getenv("REVIEW_TTL_SECONDS", "86400"))  # 24 hours

    # Characters of surrounding markup reported around a token
    context_window: int = int(os.getenv("CONTEXT_WINDOW", "100"))


settings = Settings()
