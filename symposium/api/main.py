"""
Symposium HTTP application.

Builds the FastAPI app: startup creates tables and seeds the built-in
consultant templates, then routers, middlewares (request audit, security
headers, development CORS) and the SymposiumError handlers are attached.

Run with: uvicorn symposium.api.main:app --reload
"""
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from symposium import __version__
from symposium.core.audit import AuditMiddleware, SecurityHeadersMiddleware
from symposium.core.config import get_settings
from symposium.core.exceptions import SymposiumError, ValidationError
from symposium.core.logging_config import get_logger, setup_logging
from symposium.api.routes import (
    catalog_router,
    chat_router,
    consultants_router,
    health_router,
    knowledge_router,
    messages_router,
    symposiums_router,
)
from symposium.database.init_db import init_tables


# Initialize logging before anything else
settings = get_settings()
setup_logging(settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    - Startup: create tables, seed templates (and demo data if enabled)
    - Shutdown: close database connections
    """
    logger.info(f"Starting {settings.app_name} in {settings.app_env} mode")
    logger.info(f"LLM gateway: {settings.openrouter_base_url}")
    logger.info(f"Audit Logging: {settings.enable_audit_logging}")

    init_tables()

    yield  # Application runs here

    logger.info(f"Shutting down {settings.app_name}")

    from symposium.database.connection import get_database
    get_database().close()


app = FastAPI(
    title="Symposium API",
    description="""
    Multi-consultant chat: create symposiums, add AI consultants and talk to them.

    ## Features

    - **Consultants**: conversational, Airtable-backed or web-search-backed
    - **Visibility**: hide individual messages from individual consultants
    - **Knowledge base**: reusable context cards with tags
    - **Query builder**: structured Airtable queries validated against the live schema
    """,
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# ============================================================
# Middleware Configuration (Order matters!)
# ============================================================

app.add_middleware(SecurityHeadersMiddleware)

if settings.enable_audit_logging:
    app.add_middleware(AuditMiddleware)
    logger.info("Audit logging middleware enabled")

if settings.is_development():
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    logger.warning("CORS configured for development (all origins allowed)")


# ============================================================
# Exception Handlers
# ============================================================

@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    """Handle validation errors."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


@app.exception_handler(SymposiumError)
async def symposium_exception_handler(request: Request, exc: SymposiumError):
    """Handle all application exceptions."""
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code}: {exc.message}")
    else:
        logger.warning(f"{exc.error_code}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """
    Handle uncaught exceptions globally.

    Detailed error information is only included in development mode.
    """
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred",
            "details": str(exc) if settings.is_development() else None,
            "timestamp": datetime.utcnow().isoformat()
        }
    )


# ============================================================
# Routers
# ============================================================

app.include_router(health_router)
app.include_router(symposiums_router)
app.include_router(consultants_router)
app.include_router(messages_router)
app.include_router(chat_router)
app.include_router(knowledge_router)
app.include_router(catalog_router)


@app.get("/", include_in_schema=False)
async def root():
    return {
        "message": "Symposium API",
        "version": __version__,
        "documentation": "/docs",
        "health": "/health"
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "symposium.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development()
    )
