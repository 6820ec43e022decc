"""
Agro Koi Store — FastAPI Application

Account registration and management, admin-managed storefront content,
checkout records, and Xendit payment reconciliation.
"""
import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Settings, load_settings
from database import build_engine, build_session_factory, init_db
from domain.errors import DomainError
from domain.responses import error_response
from routes import auth, checkout, company_contacts, health, password, term_conditions, users, xendit
from services.mailer import LoggingMailer, Mailer

# ── Logging ─────────────────────────────────────────────────────────

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan ────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: validate settings, create DB tables. Shutdown: dispose the engine."""
    settings: Settings = app.state.settings
    settings.validate_production_settings()

    # Ensure data/ directory exists for SQLite
    if settings.database_url.startswith("sqlite:///./data/"):
        os.makedirs("data", exist_ok=True)

    await init_db(app.state.engine)
    logger.info("Database initialized")

    yield  # app runs here

    await app.state.engine.dispose()
    logger.info("Shutting down")


# ── Exception Handlers ──────────────────────────────────────────────


async def global_exception_handler(request, exc):
    """
    Catch-all for unhandled exceptions.

    Never return raw exception details to clients.
    The full traceback is logged server-side for debugging.
    """
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content=error_response("internal_server_error", "Internal server error"),
    )


async def http_exception_handler(request, exc: StarletteHTTPException):
    """
    Standardize HTTP error responses for frontend consumers.

    Keeps the original HTTP status code (and headers), but wraps the payload.
    """
    headers = getattr(exc, "headers", None)

    if isinstance(exc, DomainError):
        error_code = exc.__class__.__name__.replace("Error", "").lower()
        return JSONResponse(
            status_code=exc.status_code,
            content=error_response(error_code, exc.message, exc.details),
            headers=headers,
        )

    detail = exc.detail
    message = detail if isinstance(detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(
            "http_error",
            message,
            detail if not isinstance(detail, str) else None,
        ),
        headers=headers,
    )


# ── App Factory ─────────────────────────────────────────────────────


def create_app(settings: Optional[Settings] = None, mailer: Optional[Mailer] = None) -> FastAPI:
    """
    Build the application around an explicit Settings object.

    Handlers see settings, the session factory and the mailer only through
    app.state, so tests can build isolated apps.
    """
    settings = settings or load_settings()

    app = FastAPI(
        title="Agro Koi Store API",
        description="Accounts, storefront content, checkouts and Xendit payment reconciliation",
        version="1.0.0",
        lifespan=lifespan,
    )

    engine = build_engine(
        settings.async_database_url,
        echo=(settings.environment == "development"),
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)
    app.state.mailer = mailer or LoggingMailer()

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Routes ──────────────────────────────────────────────────────
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(password.router)
    app.include_router(users.router)
    app.include_router(checkout.router)
    app.include_router(company_contacts.router)
    app.include_router(term_conditions.router)
    app.include_router(xendit.router)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    return app


app = create_app()


# ── Entrypoint ──────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port, log_level="info")
