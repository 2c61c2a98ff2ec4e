"""Main FastAPI application."""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from api import auth_router, details_router, meal_router, workout_router
from config.settings import settings
from models.database import close_mongo_connection, init_mongo, ping_database
from utils.exceptions import AppError
from utils.helpers import format_error, utcnow
from utils.logger import quiet_noisy_loggers, setup_logger

logger = setup_logger(__name__)

HEALTH_PATH = "/api/health"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown events."""
    # Startup
    logger.info("Starting application...")
    quiet_noisy_loggers()
    await init_mongo()  # Connect to MongoDB and initialize collections with indexes
    logger.info("Application started successfully")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    await close_mongo_connection()
    logger.info("Application shut down")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Fitness tracking API: workouts, meals and body measurements",
    lifespan=lifespan,
)

# Remove duplicates while preserving order
unique_origins = list(dict.fromkeys(settings.cors_origins))
logger.info(f"CORS configured with origins: {unique_origins}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=unique_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    """Log method, path, status and duration for every request but health checks."""
    started = time.perf_counter()
    response = await call_next(request)
    if request.url.path != HEALTH_PATH:
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f} ms"
        )
    return response


# ---------------------------
# Error handlers
# ---------------------------

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=format_error(exc.message))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else first.get("msg")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content=format_error(message))


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content=format_error(str(exc.detail)))


@app.exception_handler(PyMongoError)
async def database_error_handler(request: Request, exc: PyMongoError):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content=format_error("Database operation failed"))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
    message = str(exc) if settings.debug else "Internal server error"
    return JSONResponse(status_code=500, content=format_error(message))


# Include API routes
app.include_router(auth_router.router)
app.include_router(workout_router.router)
app.include_router(meal_router.router)
app.include_router(details_router.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": settings.app_name,
        "version": settings.app_version,
        "status": "running"
    }


@app.get(HEALTH_PATH)
async def health_check():
    """Health check endpoint."""
    connected = await ping_database()
    return {
        "status": "ok",
        "db": "connected" if connected else "disconnected",
        "timestamp": utcnow().isoformat() + "Z",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
