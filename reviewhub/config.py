"""Process-wide settings, read once from the environment at import."""
import os
from typing import NamedTuple

from dotenv import load_dotenv

load_dotenv()


class Settings(NamedTuple):
    database_url: str
    jwt_secret: str
    token_ttl_seconds: int
    port: int
    log_level: str


DEFAULT_SECRET = "dev-secret"


def _normalise_db_url(url: str) -> str:
    # Heroku/Render style URLs are not accepted by SQLAlchemy 1.4+
    if url.startswith("postgres://"):
        return "postgresql://" + url[len("postgres://"):]
    return url


def load_settings() -> Settings:
    return Settings(
        database_url=_normalise_db_url(os.getenv("DATABASE_URL", "sqlite:///./reviewhub.db")),
        jwt_secret=os.getenv("JWT_SECRET", DEFAULT_SECRET),
        token_ttl_seconds=int(os.getenv("TOKEN_TTL_SECONDS", 60 * 60 * 2)),
        port=int(os.getenv("PORT", 3000)),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


settings = load_settings()
