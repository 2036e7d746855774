from __future__ import annotations

import logging
import sys
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

load_dotenv()

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    amadeus_api_key: str = Field("", alias="AMADEUS_API_KEY")
    amadeus_api_secret: str = Field("", alias="AMADEUS_API_SECRET")
    amadeus_base_url: str = Field(
        "https://test.api.amadeus.com", alias="AMADEUS_BASE_URL"
    )
    search_timeout_s: float = Field(30.0, alias="SEARCH_TIMEOUT_S")
    location_timeout_s: float = Field(10.0, alias="LOCATION_TIMEOUT_S")
    token_safety_margin_s: int = Field(60, alias="TOKEN_SAFETY_MARGIN_S")
    histogram_bucket_width: int = Field(50, alias="HISTOGRAM_BUCKET_WIDTH")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    @field_validator("amadeus_base_url")
    @classmethod
    def _strip_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("search_timeout_s", "location_timeout_s")
    @classmethod
    def _timeout_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeouts must be greater than 0")
        return v

    @field_validator("token_safety_margin_s")
    @classmethod
    def _margin_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("TOKEN_SAFETY_MARGIN_S must not be negative")
        return v

    @field_validator("histogram_bucket_width")
    @classmethod
    def _width_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("HISTOGRAM_BUCKET_WIDTH must be greater than 0")
        return v


@lru_cache()
def get_settings() -> Settings:
    """Return application settings loaded from the environment."""
    return Settings()  # type: ignore[call-arg]


def configure_logging(level: str = "INFO") -> None:
    """Set up root logging for command line entry points."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


__all__ = ["Settings", "get_settings", "configure_logging"]
