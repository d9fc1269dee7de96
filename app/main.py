"""
Payzen HR Backend - Main Application Entry Point
"""
import logging
from urllib.parse import urlparse, urlunparse

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.router import api_router
from app.core.config import settings
from app.core.errors import (
    generic_exception_handler,
    http_exception_handler,
    integrity_exception_handler,
    persistence_exception_handler,
    validation_exception_handler,
)
from app.core.logging import setup_logging
from app.db.init_db import bootstrap_initial_admin
from app.db.session import SessionLocal, create_tables

# Setup logging first
setup_logging()
logger = logging.getLogger(__name__)


def _mask_database_url(url: str) -> str:
    """Mask password in DATABASE_URL for safe logging; show full path for sqlite."""
    parsed = urlparse(url)
    if parsed.scheme.startswith("sqlite"):
        return url
    if parsed.password:
        netloc = f"{parsed.username}:****@{parsed.hostname or ''}"
        if parsed.port:
            netloc += f":{parsed.port}"
        return urlunparse(parsed._replace(netloc=netloc))
    return url


# Create FastAPI app
app = FastAPI(
    title="Payzen HR Backend",
    description="Payroll and HR management: companies, employees, referentials, RBAC and audit trail",
    version=settings.VERSION or "1.0.0"
)

# Configure CORS - must be before other middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register exception handlers
# Starlette base class so routing 404/405 share the error body
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(IntegrityError, integrity_exception_handler)
app.add_exception_handler(SQLAlchemyError, persistence_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# Include all API routes under /api
app.include_router(api_router, prefix="/api")


@app.on_event("startup")
def startup_log_config() -> None:
    """Log DATABASE_URL at startup so it can be verified against Alembic."""
    logger.info("DATABASE_URL (app): %s", _mask_database_url(settings.DATABASE_URL))


@app.on_event("startup")
def bootstrap_database() -> None:
    """
    Create tables on SQLite, then seed permissions and the initial admin.

    Other backends are migrated with `alembic upgrade head`.
    """
    if settings.DATABASE_URL.startswith("sqlite"):
        create_tables()

    db = SessionLocal()
    try:
        bootstrap_initial_admin(db)
    except OperationalError as e:
        db.rollback()
        if "no such table" in str(e).lower() or "does not exist" in str(e).lower():
            logger.warning("Database tables not ready yet (run alembic upgrade head), skipping bootstrap")
        else:
            raise
    finally:
        db.close()
