"""FastAPI application entry point."""

import sys
import logging
import tomllib
from pathlib import Path
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# Load environment variables from .env file
# Must be called before Settings.from_env() reads them
load_dotenv()

# main.py is at <root>/src/api/main.py, src is two levels up
_src_path = Path(__file__).parent.parent
sys.path.insert(0, str(_src_path))

from api.config import Settings
from api.context import build_context
from api.docs import DOCS_PATH, docs_router
from api.middleware.errors import UnhandledErrorMiddleware, install_error_handlers
from api.middleware.latency import LatencyMiddleware
from api.routes import auth
from port.user_repository import UserRepository
from utils.logging import setup_structured_logging

logger = logging.getLogger(__name__)

# Read version from pyproject.toml (single source of truth)
_project_root = _src_path.parent
with open(_project_root / "pyproject.toml", "rb") as f:
    VERSION = tomllib.load(f)["project"]["version"]

SERVICE_NAME = "Auth Stub API"


def _configure_cors(app: FastAPI, cors_origins_env: str) -> None:
    # Browsers don't support credentials with a wildcard origin
    if cors_origins_env == "*":
        cors_origins = ["*"]
        allow_credentials = False
    else:
        cors_origins = [origin.strip() for origin in cors_origins_env.split(",") if origin.strip()]
        allow_credentials = True
        logger.info("CORS configured with specific origins", extra={"origins": cors_origins})

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def create_app(settings: Settings | None = None, user_repo: UserRepository | None = None) -> FastAPI:
    """Build the application with its own context.

    Composition order: documentation, latency, auth routes, then the
    terminal error and not-found handlers.
    """
    if settings is None:
        settings = Settings.from_env()

    app = FastAPI(
        title=SERVICE_NAME,
        version=VERSION,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.context = build_context(settings, user_repo)

    app.include_router(docs_router)
    app.include_router(auth.router)
    # Routers whose handler docstrings feed the OpenAPI document
    app.state.documented_routers = (auth.router,)

    # add_middleware wraps outward: the error boundary ends up inside CORS
    app.add_middleware(UnhandledErrorMiddleware, settings=settings)
    # Documentation is served before the delay applies
    app.add_middleware(LatencyMiddleware, delay=settings.latency_seconds, exempt_prefixes=(DOCS_PATH,))
    _configure_cors(app, settings.cors_origins)

    install_error_handlers(app, settings)

    logger.info("Application created", extra={
        "environment": settings.environment,
        "latencyMs": settings.latency_ms,
        "users": app.state.context.user_repo.count(),
    })
    return app


# Module-level app for `uvicorn api.main:app`
settings = Settings.from_env()
setup_structured_logging(settings.log_level)
app = create_app(settings)


if __name__ == "__main__":
    import uvicorn

    # Disable uvicorn access logs to reduce noise
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=settings.port,
        access_log=False,
    )
