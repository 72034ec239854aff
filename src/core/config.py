"""Application settings, read from the environment and a per-environment file."""

import json
import os
from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Dotenv file read for each supported ENVIRONMENT (tests use none)
ENV_FILES: dict[str, str | None] = {
    "development": ".env.dev",
    "production": ".env.prod",
    "test": None,
}
DEV_SECRET_KEY = "dev-test-secret"


def parse_origins(raw: str) -> list[str]:
    """Read origins from a CSV string or a JSON array string."""
    text = raw.strip()
    if not text.startswith("["):
        return [origin.strip() for origin in text.split(",") if origin.strip()]
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(
            "CORS_ORIGINS must be a CSV list or JSON array string"
        ) from exc
    if not isinstance(parsed, list):
        raise ValueError("CORS_ORIGINS JSON must be a list")
    return [str(origin).strip() for origin in parsed]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    APP_NAME: str = "Recipe Catalog"
    ENVIRONMENT: str = "development"

    # Bearer tokens issued by POST /auth/login
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # Anonymous callers of protected actions are redirected here
    LOGIN_URL: str = "/auth/login"

    # Env values may be CSV or a JSON array; always a list once validated
    CORS_ORIGINS: list[str] | str = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]
    ALLOW_CREDENTIALS: bool = True

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: object) -> list[str]:
        if isinstance(v, str):
            return parse_origins(v)
        if isinstance(v, list):
            return [str(origin).strip() for origin in v]
        raise ValueError("Invalid CORS_ORIGINS type; expected str or list[str]")

    @model_validator(mode="after")
    def _reject_credentialed_wildcard(self) -> "Settings":
        if self.ALLOW_CREDENTIALS and "*" in self.CORS_ORIGINS:
            raise ValueError(
                "CORS configuration error: ALLOW_CREDENTIALS=True but "
                "CORS_ORIGINS contains '*'. List explicit origins instead."
            )
        return self


@lru_cache
def get_settings() -> Settings:
    env = os.getenv("ENVIRONMENT", "development").lower()
    if env not in ENV_FILES:
        raise ValueError("ENVIRONMENT must be 'development', 'production', or 'test'")
    env_file = ENV_FILES[env]

    if env == "development" and not (env_file and os.path.exists(env_file)):
        os.environ.setdefault("SECRET_KEY", DEV_SECRET_KEY)
    if env == "production" and os.getenv("SECRET_KEY") in (None, "", DEV_SECRET_KEY):
        raise RuntimeError("SECRET_KEY must be set to a secure value in production")

    return Settings(_env_file=env_file)  # type: ignore[call-arg]
