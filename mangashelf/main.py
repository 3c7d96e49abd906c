import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from mangashelf.api.v1.router import api_router
from mangashelf.core.config import settings
from mangashelf.core.database import SessionLocal, init_db
from mangashelf.core.exceptions import StorageUnavailable
from mangashelf.schemas.response import ErrorResponse, Messages


# Configure logging
def setup_logging():
    """Configure logging for the application"""
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    handlers = [logging.StreamHandler(sys.stdout)]
    if settings.LOG_FILE:
        log_file = Path(settings.LOG_FILE)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )

    # Set specific loggers to appropriate levels
    logging.getLogger("uvicorn").setLevel(logging.WARNING)
    logging.getLogger("fastapi").setLevel(logging.WARNING)
    logging.getLogger("PIL").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging configured with level: {settings.LOG_LEVEL}")


# Setup logging before creating the app
setup_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    logger.info("Mangashelf starting up...")
    init_db()
    Path(settings.MANGA_DIR).mkdir(parents=True, exist_ok=True)
    logger.info(f"Serving media from {Path(settings.MANGA_DIR).resolve()}")

    yield

    # Shutdown
    logger.info("Mangashelf shutting down...")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description=settings.DESCRIPTION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

# Set up CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    logger.warning(f"422 Validation Error on {request.method} {request.url.path}: {errors}")

    content = ErrorResponse(
        message=Messages.INVALID_REQUEST,
        errors=[
            f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg')}"
            for error in errors
        ],
    ).model_dump()
    content["detail"] = jsonable_encoder(errors)
    return JSONResponse(status_code=422, content=content)


@app.exception_handler(StorageUnavailable)
async def storage_exception_handler(request: Request, exc: StorageUnavailable):
    logger.error(f"Storage failure on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            message=Messages.STORAGE_UNAVAILABLE, errors=[exc.message]
        ).model_dump(),
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database failure on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(message=Messages.STORAGE_UNAVAILABLE).model_dump(),
    )


# Include API router
app.include_router(api_router, prefix=settings.API_V1_STR)

# Uploaded covers, pages and avatars
app.mount(
    settings.MEDIA_URL_PREFIX,
    StaticFiles(directory=settings.MANGA_DIR, check_dir=False),
    name="media",
)


# Health check endpoint
@app.get("/health")
def health_check():
    """Health check endpoint for monitoring and load balancers"""
    try:
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        finally:
            db.close()
    except SQLAlchemyError as e:
        raise HTTPException(
            status_code=503,
            detail={
                "status": "unhealthy",
                "timestamp": datetime.utcnow().isoformat(),
                "error": str(e),
                "database": "disconnected",
            },
        )

    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "version": settings.VERSION,
        "database": "connected",
        "environment": settings.ENVIRONMENT,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
