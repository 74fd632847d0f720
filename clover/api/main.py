"""
clover.api.main — FastAPI application entry point
==================================================

Run with::

    uvicorn clover.api.main:app --reload --port 8000

or ``python -m clover.api`` to use the port from ``config.yaml``.
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

load_dotenv()

from clover.api.auth import router as auth_router  # noqa: E402
from clover.api.routes.achievements import router as achievements_router  # noqa: E402
from clover.api.routes.activities import router as activities_router  # noqa: E402
from clover.api.routes.leaderboards import router as leaderboards_router  # noqa: E402
from clover.api.routes.notices import router as notices_router  # noqa: E402
from clover.api.routes.posts import router as posts_router  # noqa: E402
from clover.api.routes.teams import router as teams_router  # noqa: E402
from clover.api.routes.users import router as users_router  # noqa: E402
from clover.config import (  # noqa: E402
    CloverConfig,
    config_path_from_env,
    load_config,
    load_session_secret,
)
from clover.database.seed import seed_sample_data  # noqa: E402
from clover.errors import (  # noqa: E402
    CapacityExceeded,
    CloverError,
    EmailAlreadyInUse,
    InvalidCredentials,
    NotAuthenticated,
    NotFound,
)
from clover.services.auth_service import AuthService, hash_password  # noqa: E402
from clover.services.notices import NoticeBuffer  # noqa: E402
from clover.services.session_slot import FileSessionSlot  # noqa: E402
from clover.services.store import Database  # noqa: E402

logger = logging.getLogger(__name__)

_ERROR_STATUS: dict[type[CloverError], int] = {
    NotFound: status.HTTP_404_NOT_FOUND,
    CapacityExceeded: status.HTTP_409_CONFLICT,
    EmailAlreadyInUse: status.HTTP_409_CONFLICT,
    InvalidCredentials: status.HTTP_401_UNAUTHORIZED,
    NotAuthenticated: status.HTTP_401_UNAUTHORIZED,
}


def _cors_origins() -> list[str]:
    """Resolve allowed CORS origins from env with safe defaults.

    Priority:
      1) CORS_ALLOW_ORIGINS (comma-separated)
      2) FRONTEND_URL (single origin)
    """
    raw = os.getenv("CORS_ALLOW_ORIGINS", "").strip()
    if raw:
        return [origin.strip().rstrip("/") for origin in raw.split(",") if origin.strip()]

    frontend_url = os.getenv("FRONTEND_URL", "").strip()
    if frontend_url:
        return [frontend_url.rstrip("/")]

    return []


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------
async def _clover_error(request: Request, exc: CloverError) -> JSONResponse:
    code = _ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    return JSONResponse(status_code=code, content={"detail": str(exc)})


async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            "detail": jsonable_encoder(exc.errors(include_url=False, include_context=False))
        },
    )


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------
def create_app(cfg: CloverConfig | None = None) -> FastAPI:
    """Build the API.  *cfg* defaults to ``config.yaml`` (or ``$CLOVER_CONFIG``)."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle: build the store and the session."""
        config = cfg if cfg is not None else load_config(config_path_from_env())
        secret = load_session_secret()

        store = Database()
        if config.seed_sample_data:
            password_hash = hash_password(config.seed_password) if config.seed_password else None
            seed_sample_data(store, password_hash=password_hash)

        notices = NoticeBuffer(config.notice_capacity)
        auth = AuthService(
            store,
            FileSessionSlot(config.session_slot_path),
            secret=secret,
            notify=notices,
            avatar_base_url=config.avatar_base_url,
            community_name=config.community_name,
        )

        app.state.config = config
        app.state.store = store
        app.state.notices = notices
        app.state.auth = auth
        logger.info("%s API started — %d members", config.community_name, len(store.list_users()))
        yield
        store.engine.dispose()
        logger.info("%s API shutting down", config.community_name)

    app = FastAPI(
        title="Clover Sports API",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(CloverError, _clover_error)
    app.add_exception_handler(ValidationError, _validation_error)

    app.include_router(auth_router, prefix="/api")
    app.include_router(users_router, prefix="/api")
    app.include_router(activities_router, prefix="/api")
    app.include_router(teams_router, prefix="/api")
    app.include_router(posts_router, prefix="/api")
    app.include_router(achievements_router, prefix="/api")
    app.include_router(leaderboards_router, prefix="/api")
    app.include_router(notices_router, prefix="/api")

    @app.get("/api/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
