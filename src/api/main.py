"""FastAPI application entry point."""

import logging
import sys
import tomllib
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# main.py is at <root>/src/api/main.py; allow `python src/api/main.py`
_src_path = Path(__file__).parent.parent
if str(_src_path) not in sys.path:
    sys.path.insert(0, str(_src_path))

from adapter.mongodb.connection import get_mongodb_client
from adapter.mongodb.indexes import ensure_all_indexes
from api.errors import register_exception_handlers
from api.rate_limit import SlidingWindowRateLimiter
from api.routes import auth, health, notes
from services.token_service import TokenIssuer
from utils.config import AppConfig
from utils.logging import setup_structured_logging

logger = logging.getLogger(__name__)

SERVICE_NAME = "Notes App API"


def _read_version() -> str:
    """Version from pyproject.toml (single source of truth)."""
    try:
        with open(_src_path.parent / "pyproject.toml", "rb") as f:
            return tomllib.load(f)["project"]["version"]
    except (OSError, KeyError, tomllib.TOMLDecodeError):
        return "unknown"


VERSION = _read_version()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: ensure MongoDB indexes on startup."""
    config: AppConfig = app.state.config
    client = get_mongodb_client(config.mongo_uri)
    if client:
        if ensure_all_indexes(client[config.mongodb_database]):
            logger.info("MongoDB indexes verified/created successfully")
        else:
            logger.warning("Failed to create some MongoDB indexes")
    else:
        logger.warning("MongoDB unavailable, skipping index creation")

    yield


def create_app(config: AppConfig | None = None) -> FastAPI:
    """Build the application. Reads the environment when no config is given."""
    if config is None:
        config = AppConfig.from_env()

    setup_structured_logging(config.log_level)

    app = FastAPI(
        title=SERVICE_NAME,
        description="Notes service with email OTP and Google sign-in",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.token_issuer = TokenIssuer(
        config.jwt_secret, algorithm=config.jwt_algorithm, ttl=config.token_ttl
    )
    app.state.otp_rate_limiter = SlidingWindowRateLimiter(
        config.otp_rate_limit_requests, config.otp_rate_limit_window
    )

    # Browsers reject credentials with a wildcard origin
    cors_origins = list(config.cors_origins)
    allow_credentials = "*" not in cors_origins
    if not allow_credentials:
        logger.warning(
            "CORS configured with wildcard origin ('*'). "
            "For production, set CORS_ORIGINS to specific domains"
        )
    else:
        logger.info("CORS configured with specific origins", extra={"origins": cors_origins})

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=allow_credentials,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(notes.router)
    app.include_router(health.router)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "service": SERVICE_NAME,
            "version": VERSION,
            "status": "running"
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    # Application logs go through structured logging; uvicorn's access log is noise
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=app.state.config.port,
        access_log=False,
    )
