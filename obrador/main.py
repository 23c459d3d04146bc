# Obrador - Main Application
# FastAPI application factory and startup

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from obrador import __version__
from obrador.config import get_settings
from obrador.database import check_connection
from obrador.exceptions import TimesheetError


settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan events.
    
    Runs on startup and shutdown.
    """
    logger.info("Starting %s...", settings.app_name)
    
    try:
        check_connection()
        logger.info("Database connection: OK")
    except Exception as e:
        logger.error("Database connection: FAILED - %s", e)
        if not settings.debug:
            raise
    
    yield
    
    logger.info("Shutting down %s...", settings.app_name)


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item not in ("body", "query"))
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts) or "Datos invalidos"


def register_error_handlers(app: FastAPI) -> None:
    """Render engine errors as {"error": message} with their status code."""
    
    @app.exception_handler(TimesheetError)
    async def timesheet_error_handler(request: Request, exc: TimesheetError):
        if exc.status_code >= 500:
            logger.warning("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})
    
    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": _validation_message(exc)})
    
    @app.exception_handler(HTTPException)
    async def http_error_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )


def create_app() -> FastAPI:
    """
    Application factory.
    
    Creates and configures the FastAPI application.
    """
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    
    app = FastAPI(
        title=settings.app_name,
        description="Operations tracker: timesheet accounting engine",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )
    
    register_error_handlers(app)
    
    from obrador.routes import timesheets
    app.include_router(timesheets.router)
    
    @app.get("/health")
    def health_check():
        """Health check endpoint for monitoring."""
        try:
            check_connection()
            db_status = "healthy"
        except Exception as e:
            db_status = f"unhealthy: {e}"
        
        return {
            "status": "ok",
            "app": settings.app_name,
            "database": db_status,
        }
    
    return app


# Create the app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    
    uvicorn.run(
        "obrador.main:app",
        host="0.0.0.0",
        port=8001,
        reload=settings.debug,
    )
