import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env
load_dotenv()

DEFAULT_TIMEOUT_MS = 300_000  # 5m
MIN_TIMEOUT_MS = 10_000       # 10s
MAX_TIMEOUT_MS = 3_600_000    # 60m


def env_flag(value: Optional[str]) -> bool:
    return str(value or "").strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    xai_api_key: str
    xai_model: str
    xai_base_url: str
    default_timeout_ms: int
    stub_mode: bool
    geocoding_api_key: str
    mongo_url: str
    mongo_db_name: str
    mongo_collection_name: str


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except ValueError:
        return default


def get_settings() -> Settings:
    return Settings(
        xai_api_key=os.getenv("XAI_API_KEY", ""),
        xai_model=os.getenv("XAI_MODEL", "grok-4-latest"),
        xai_base_url=os.getenv("XAI_BASE_URL", "https://api.x.ai/v1"),
        default_timeout_ms=_int_env("XAI_TIMEOUT_MS", DEFAULT_TIMEOUT_MS),
        stub_mode=env_flag(os.getenv("XAI_STUB")),
        geocoding_api_key=os.getenv("GOOGLE_GEOCODING_API_KEY", ""),
        mongo_url=os.getenv("MONGODB_URL", ""),
        mongo_db_name=os.getenv("MONGO_DB_NAME", "tabarnam-db"),
        mongo_collection_name=os.getenv("MONGO_COLLECTION_NAME", "companies_ingest"),
    )


def clamp_timeout(ms: Optional[float]) -> int:
    """Clamp a completion timeout to [10s, 60m]; anything non-numeric gets the 5m default."""
    try:
        value = float(ms)
    except (TypeError, ValueError):
        return DEFAULT_TIMEOUT_MS
    if value != value or value in (float("inf"), float("-inf")):
        return DEFAULT_TIMEOUT_MS
    return int(min(MAX_TIMEOUT_MS, max(MIN_TIMEOUT_MS, value)))
