# Main application entry point
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from . import __version__
from .api import auth_router, health_router, notes_router, public_router, sharing_router
from .config import get_settings
from .core.exceptions import InternalError, InvalidOperationError, NoteGateError
from .core.logging import LoggingMiddleware, get_logger, setup_logging
from .core.redis_client import get_redis_client
from .core.schemas.common import ErrorResponse
from .database import Database

# Setup logging first
setup_logging()
logger = get_logger("main")

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(
        "Starting NoteGate application",
        extra={"version": __version__, "environment": settings.environment, "debug": settings.debug},
    )

    # Tests install their own Database on app.state before startup
    owns_database = getattr(app.state, "database", None) is None
    if owns_database:
        database = Database.from_settings(settings)
        try:
            await database.create_tables()
            logger.info("Database tables created/verified")
        except Exception as e:
            logger.error("Failed to create database tables", exc_info=e)
            await database.dispose()
            raise
        app.state.database = database

    redis_client = get_redis_client()
    try:
        await redis_client.connect()
        logger.info("Redis connection established")
    except Exception as e:
        logger.warning(f"Redis connection failed: {e}. Continuing without Redis...")

    yield

    logger.info("Shutting down NoteGate application")
    await redis_client.disconnect()
    if owns_database:
        await app.state.database.dispose()
        app.state.database = None
        logger.info("Database engine disposed")


def _error_response(exc: NoteGateError) -> JSONResponse:
    body = ErrorResponse(error=exc.error, message=exc.message, details=exc.details)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))


async def notegate_error_handler(request: Request, exc: NoteGateError) -> JSONResponse:
    return _error_response(exc)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
    return _error_response(InvalidOperationError("Request validation failed", {"errors": errors}))


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Unhandled database error", exc_info=exc)
    return _error_response(InternalError("Store operation failed"))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(NoteGateError, notegate_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)


app = FastAPI(
    title=settings.app_name,
    description="Notes with per-user sharing and public links",
    version=__version__,
    lifespan=lifespan,
)

register_exception_handlers(app)

# Add logging middleware
app.add_middleware(LoggingMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth_router, prefix="/api")
app.include_router(notes_router, prefix="/api")
app.include_router(sharing_router, prefix="/api")
app.include_router(public_router, prefix="/api")
app.include_router(health_router, prefix="/api")


@app.get("/api/")
async def api_root():
    return {
        "message": "NoteGate API",
        "version": __version__,
        "documentation": {"swagger_ui": "/docs", "redoc": "/redoc", "openapi_json": "/openapi.json"},
        "endpoints": {
            "authentication": "/api/auth/",
            "notes": "/api/notes/",
            "sharing": "/api/sharing/",
            "public": "/api/public/{token}",
            "health": "/api/health/",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("notegate.main:app", host=settings.host, port=settings.port, reload=settings.reload)
