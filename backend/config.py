import os
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


def _parse_cors_origins() -> list[str] | None:
    """Parse CORS_ORIGINS env var as comma-separated string or JSON list."""
    raw = os.environ.get("CORS_ORIGINS")
    if not raw:
        return None
    if raw.startswith("["):
        import json
        return json.loads(raw)
    return [o.strip() for o in raw.split(",") if o.strip()]


ContentKind = Literal[
    "card-interpretation",
    "reflection-prompts",
    "personalized-guidance",
    "north-node-insight",
    "compatibility-report",
    "structured-reflection",
]


class Settings(BaseSettings):
    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    )
    gemini_model: str = "gemini-2.5-flash"
    request_timeout_s: int = 120
    cors_origins: list[str] = [
        "http://localhost:8081",
        "http://localhost:19006",
        "exp://localhost:8081",
    ]
    debug: bool = False

    # Retry policy for upstream generation calls
    retry_max_attempts: int = Field(3, ge=1)
    retry_base_delay_ms: int = Field(2000, ge=0)
    retry_backoff_multiplier: float = Field(1.5, gt=1)
    retry_jitter_ms: int = Field(1000, ge=0)

    # Kinds allowed to substitute a local fallback when generation fails
    fallback_kinds: list[ContentKind] = [
        "card-interpretation",
        "reflection-prompts",
        "personalized-guidance",
        "north-node-insight",
        "compatibility-report",
    ]
    fallback_seed: int | None = None  # seed fallback randomness (tests)

    ai_rate_limit: str = "30/minute"
    rate_limit_enabled: bool = True

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


_cors_override = _parse_cors_origins()
settings = Settings(**{"cors_origins": _cors_override} if _cors_override else {})
