"""Configuration settings for the WOD parser API."""
import os
from typing import List, Literal, Optional

from wod_parser_api.utils import to_int


EnvironmentType = Literal["development", "staging", "production"]

DEFAULT_SUGGESTION_LIMIT = 3


class Settings:
    """Application settings."""

    # Environment
    ENVIRONMENT: EnvironmentType = "development"
    LOG_LEVEL: str = "INFO"

    # Catalogue sources (None means the packaged JSON data files)
    CATALOGUE_PATH: Optional[str] = None
    LIFTS_PATH: Optional[str] = None

    # Matching
    SUGGESTION_LIMIT: int = DEFAULT_SUGGESTION_LIMIT

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:3001"]

    def __init__(self):
        # Environment
        env = os.getenv("ENVIRONMENT", "development").lower()
        if env in ("development", "staging", "production"):
            self.ENVIRONMENT = env  # type: ignore
        else:
            self.ENVIRONMENT = "development"

        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

        # Catalogue sources
        self.CATALOGUE_PATH = os.getenv("CATALOGUE_PATH") or None
        self.LIFTS_PATH = os.getenv("LIFTS_PATH") or None

        # Matching
        limit = to_int(os.getenv("SUGGESTION_LIMIT"))
        self.SUGGESTION_LIMIT = limit if limit and limit > 0 else DEFAULT_SUGGESTION_LIMIT

        origins = os.getenv("CORS_ORIGINS")
        if origins:
            self.CORS_ORIGINS = [o.strip() for o in origins.split(",") if o.strip()]
        else:
            self.CORS_ORIGINS = list(Settings.CORS_ORIGINS)


settings = Settings()
