"""
FastAPI application entry point.
Application factory with middleware, exception handlers and route configuration.
"""
from contextlib import asynccontextmanager
from typing import Optional
import asyncio
import logging

from fastapi import FastAPI, Request, status, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from blog_api.config import Settings, settings as default_settings
from blog_api.context import ServiceContext
from blog_api.database import get_db, init_db, close_db
from blog_api.routes import blog

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Verify the database and upload directory on startup, dispose the
    engine on shutdown.
    """
    context: ServiceContext = app.state.context
    upload_dir = context.image_store.ensure_directory()
    logger.info(f"Serving uploads from {upload_dir.resolve()} at {context.image_store.url_prefix}")

    try:
        await init_db(context.engine, create_tables=context.settings.AUTO_CREATE_TABLES)
    except Exception as e:
        logger.error(
            f"Failed to initialize database on startup: {str(e)}\n"
            f"The application will continue to run, but blog endpoints will fail.\n"
            f"Please check your database configuration and network connectivity."
        )

    yield

    try:
        await close_db(context.engine)
    except Exception as e:
        # Cancellation during shutdown is expected
        if not isinstance(e, (KeyboardInterrupt, asyncio.CancelledError)):
            logger.warning(f"Error during database shutdown: {str(e)}")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application around a single ServiceContext.

    Args:
        settings: Settings to use; defaults to values from the environment

    Returns:
        FastAPI: Configured application
    """
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)
    context = ServiceContext.from_settings(settings)

    app = FastAPI(
        title=settings.API_TITLE,
        description=settings.API_DESCRIPTION,
        version=settings.API_VERSION,
        lifespan=lifespan,
    )
    app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=False,  # Must be False when using wildcard origin
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["*"],
        max_age=3600,  # Cache preflight requests for 1 hour
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log every request with its response status."""
        method = request.method
        path = request.url.path
        try:
            response = await call_next(request)
            logger.info(f"Response status: {response.status_code} for {method} {path}")
            return response
        except Exception as e:
            logger.error(
                f"Error processing {method} {path}: {str(e)}\n"
                f"  Error type: {type(e).__name__}",
                exc_info=True
            )
            raise

    app.include_router(blog.router, prefix="/api")

    # StaticFiles checks the directory when mounted, so create it up front
    upload_dir = context.image_store.ensure_directory()
    app.mount(
        context.image_store.url_prefix,
        StaticFiles(directory=str(upload_dir)),
        name="uploads",
    )

    register_exception_handlers(app)
    register_health_routes(app)
    return app


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions (404, 405, 500 raised by routes, etc.)."""
        if exc.status_code >= 500:
            logger.error(f"HTTPException on {request.method} {request.url.path}: {exc.status_code}")
        else:
            logger.info(f"HTTPException on {request.method} {request.url.path}: {exc.status_code} {exc.detail}")

        if isinstance(exc.detail, dict):
            content = exc.detail
        else:
            content = {"error": True, "message": str(exc.detail)}

        return JSONResponse(
            status_code=exc.status_code,
            content=content,
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle request validation errors (e.g. non-integer ids)."""
        logger.info(f"Validation error on {request.method} {request.url.path}: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": True,
                "message": "Invalid request",
                "detail": jsonable_encoder(exc.errors())
            }
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle anything the routes did not turn into an HTTP error."""
        logger.error(
            f"Unhandled exception on {request.method} {request.url.path}:\n"
            f"  Error: {str(exc)}\n"
            f"  Error type: {type(exc).__name__}",
            exc_info=True
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": True, "message": "Something went wrong"}
        )


def register_health_routes(app: FastAPI) -> None:
    @app.get("/")
    async def root(request: Request):
        """Root endpoint - API health check."""
        settings = request.app.state.context.settings
        return {
            "message": settings.API_TITLE,
            "status": "healthy",
            "version": settings.API_VERSION
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    @app.get("/health/db")
    async def health_check_db(db: AsyncSession = Depends(get_db)):
        """
        Database health check endpoint.
        Tests database connection and returns status.
        """
        try:
            result = await db.execute(text("SELECT 1"))
            return {
                "database": "connected",
                "status": "healthy",
                "result": result.scalar()
            }
        except Exception as e:
            logger.error(f"Database health check failed: {str(e)}", exc_info=True)
            return {
                "database": "error",
                "status": "unhealthy",
                "error": "Database connection failed"
            }


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    configure_logging(default_settings.LOG_LEVEL)
    uvicorn.run(
        "blog_api.main:create_app",
        factory=True,
        host=default_settings.HOST,
        port=default_settings.PORT,
    )


if __name__ == "__main__":
    run()
