"""Runtime settings, read from the environment (and an optional .env)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parents[3]
load_dotenv(dotenv_path=ROOT_DIR / ".env")


def _get_env(*keys: str, default: str | None = None) -> str | None:
    for k in keys:
        v = os.getenv(k)
        if v is not None and str(v).strip() != "":
            return v.strip()
    return default


def _get_float(*keys: str, default: float) -> float:
    v = _get_env(*keys, default=None)
    if v is None:
        return default
    return float(v)


@dataclass(frozen=True)
class Settings:
    api_url: str
    api_token: str | None
    user: str | None
    data_dir: Path
    http_timeout: float
    log_level: str


def load_settings() -> Settings:
    return Settings(
        api_url=(_get_env("STOREFRONT_API_URL", "API_URL", default="http://localhost:5000/api") or "").rstrip("/"),
        api_token=_get_env("STOREFRONT_API_TOKEN", "API_TOKEN"),
        user=_get_env("STOREFRONT_USER"),
        data_dir=Path(_get_env("STOREFRONT_DATA_DIR", default=str(ROOT_DIR / "data")) or "data"),
        http_timeout=_get_float("STOREFRONT_HTTP_TIMEOUT", default=10.0),
        log_level=(_get_env("STOREFRONT_LOG_LEVEL", "LOG_LEVEL", default="WARNING") or "WARNING").upper(),
    )


settings = load_settings()
