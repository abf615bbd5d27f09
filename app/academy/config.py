import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    secret_key: str
    env: str
    database_url: str

    api_base_url: str
    api_timeout_seconds: float

    brand_name: str
    academy_name: str
    brand_logo_path: str
    receipt_background_path: str


def _getenv(name: str, default: str = "") -> str:
    return (os.environ.get(name) or default).strip()


def _getenv_float(name: str, default: float) -> float:
    raw = _getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def load_settings() -> Settings:
    return Settings(
        secret_key=_getenv("SECRET_KEY", "change-me"),
        env=_getenv("ENV", "development"),
        database_url=_getenv("DATABASE_URL", "sqlite:///academy.db"),
        api_base_url=_getenv("ACADEMY_API_BASE_URL", "https://megaverse.runasp.net"),
        api_timeout_seconds=_getenv_float("ACADEMY_API_TIMEOUT", 30.0),
        brand_name=_getenv("BRAND_NAME", "MEGAverse Platform"),
        academy_name=_getenv("ACADEMY_NAME", "MEGAverse Academy"),
        brand_logo_path=_getenv("BRAND_LOGO_PATH", ""),
        receipt_background_path=_getenv("RECEIPT_BACKGROUND_PATH", ""),
    )


def load_config() -> dict:
    s = load_settings()
    is_production = s.env in ("prod", "production")
    return {
        "SECRET_KEY": s.secret_key,
        "ENV": s.env,
        "DATABASE_URL": s.database_url,
        "ACADEMY_API_BASE_URL": s.api_base_url,
        "ACADEMY_API_TIMEOUT": s.api_timeout_seconds,
        "BRAND_NAME": s.brand_name,
        "ACADEMY_NAME": s.academy_name,
        "BRAND_LOGO_PATH": s.brand_logo_path,
        "RECEIPT_BACKGROUND_PATH": s.receipt_background_path,
        # security defaults
        "SESSION_COOKIE_HTTPONLY": True,
        "SESSION_COOKIE_SAMESITE": "Lax",
        "SESSION_COOKIE_SECURE": is_production,  # Require HTTPS in production
        # receipt upload limit (25MB)
        "MAX_CONTENT_LENGTH": 25 * 1024 * 1024,
    }
