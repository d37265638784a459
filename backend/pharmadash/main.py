"""
Pharmacy Dashboard Backend.

ARCHITECTURE:
- Database: source of truth for medications, inventory, prescriptions,
  suppliers and purchase orders. This service only reads it (plus the
  users table at login/register).
- FastAPI: read models, aggregates and chart data as JSON
- WebSockets: live charts re-fetched on every committed change
- Browser dashboard: renders the charts

The store handle and the auth service are built once per app and injected
through app.state; nothing reaches for a global session.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pharmadash.api.routes import auth, analytics, live, records
from pharmadash.core.config import settings
from pharmadash.core.rate_limiter import RateLimitMiddleware
from pharmadash.db.init_db import init_db
from pharmadash.db.store import PharmacyStore
from pharmadash.services.auth_service import AuthService
from pharmadash.services.identity_cache import IdentityCache

logger = logging.getLogger(__name__)


def create_app(
    store: Optional[PharmacyStore] = None,
    identity_cache: Optional[IdentityCache] = None,
    seed_admin: Optional[bool] = None,
) -> FastAPI:
    store = store or PharmacyStore.from_url(settings.DATABASE_URL)
    auth_service = AuthService(store, identity_cache or IdentityCache())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Startup:
        1. Create tables (and the default admin if there are no users)
        2. Restore the local client's cached session, if any
        Shutdown:
        1. Release database connections
        """
        logging.basicConfig(
            level=settings.LOG_LEVEL,
            format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        )
        init_db(store, seed_admin=seed_admin)
        logger.info("Database initialized")

        session = auth_service.restore()
        if session.is_authenticated:
            logger.info(f"Restored session for {session.identity.email}")

        yield

        store.dispose()

    app = FastAPI(
        title="Pharmacy Dashboard API",
        description="Read models, aggregates and live charts over the pharmacy database.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.store = store
    app.state.auth = auth_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Accept", "Origin"],
        max_age=600,
    )

    # Brute-force protection on login/register
    app.add_middleware(RateLimitMiddleware, prefixes=("/auth",))

    @app.middleware("http")
    async def add_security_headers(request, call_next):
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response

    app.include_router(auth.router, prefix="/auth", tags=["auth"])
    app.include_router(records.router, prefix="/records", tags=["records"])
    app.include_router(analytics.router, prefix="/analytics", tags=["analytics"])
    app.include_router(live.router, prefix="/live", tags=["live"])

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app
