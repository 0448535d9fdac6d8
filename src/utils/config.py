"""Process configuration.

Built once at startup by ``AppConfig.from_env()`` and handed to the app
factory; request handlers receive it through dependencies instead of
reading the environment themselves.
"""

import os
from dataclasses import dataclass, field
from datetime import timedelta

from dotenv import load_dotenv


class ConfigError(ValueError):
    """Required configuration is missing or malformed."""


def _get_bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y"}


def _get_int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")


@dataclass(frozen=True)
class AppConfig:
    jwt_secret: str
    mongo_uri: str
    mongodb_database: str = "notes_app"
    cors_origins: tuple[str, ...] = ("http://localhost:5173",)
    port: int = 5000
    log_level: str = "INFO"

    # JWT
    jwt_algorithm: str = "HS256"
    token_ttl: timedelta = timedelta(hours=1)

    # OTP
    otp_ttl: timedelta = timedelta(minutes=5)
    otp_rate_limit_requests: int = 3
    otp_rate_limit_window: int = 60  # seconds
    minimum_age_years: int = 13

    # Outbound mail
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 465
    smtp_use_ssl: bool = True
    smtp_username: str = ""
    smtp_password: str = field(default="", repr=False)
    email_from: str = "Notes App <no-reply@notesapp.com>"

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "AppConfig":
        """Read configuration from environment variables (and .env).

        Raises:
            ConfigError: JWT_SECRET or MONGO_URI missing, or a malformed number
        """
        if load_env_file:
            load_dotenv()

        jwt_secret = os.getenv("JWT_SECRET", "").strip()
        mongo_uri = os.getenv("MONGO_URI", "").strip()

        missing = [name for name, value in (("JWT_SECRET", jwt_secret), ("MONGO_URI", mongo_uri)) if not value]
        if missing:
            raise ConfigError(
                f"Missing required environment variables: {', '.join(missing)}. "
                "Generate a signing secret with: openssl rand -hex 32"
            )

        cors_env = os.getenv("CORS_ORIGINS", "http://localhost:5173")
        cors_origins = tuple(origin.strip() for origin in cors_env.split(",") if origin.strip())

        return cls(
            jwt_secret=jwt_secret,
            mongo_uri=mongo_uri,
            mongodb_database=os.getenv("MONGODB_DATABASE", "notes_app"),
            cors_origins=cors_origins,
            port=_get_int_env("PORT", 5000),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            smtp_host=os.getenv("SMTP_HOST", "smtp.gmail.com"),
            smtp_port=_get_int_env("SMTP_PORT", 465),
            smtp_use_ssl=_get_bool_env("SMTP_USE_SSL", True),
            smtp_username=os.getenv("EMAIL_USER", ""),
            smtp_password=os.getenv("EMAIL_PASS", ""),
            email_from=os.getenv("EMAIL_FROM", "Notes App <no-reply@notesapp.com>"),
        )
