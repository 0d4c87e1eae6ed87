"""
Taskboard - main application module.
"""
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .core.config import get_settings
from .core.database import check_db_connection, init_db
from .core import events
from .core.exceptions import AuthenticationError, InternalError, TaskboardError
from .routers import auth, projects, tasks, users

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize application on startup, clean up on shutdown"""
    logger.info("🚀 Starting Taskboard...")
    settings.validate()

    if not init_db():
        raise RuntimeError("Database initialization failed")

    if settings.rabbitmq_enabled:
        if events.event_publisher.connect():
            logger.info("RabbitMQ connection established")
        else:
            logger.warning("RabbitMQ connection failed - events will not be published")

    logger.info("✅ Taskboard startup completed")
    yield

    logger.info("Shutting down Taskboard...")
    events.event_publisher.close()
    logger.info("Taskboard shutdown completed")


# Create FastAPI application
app = FastAPI(
    title="Taskboard",
    description="Project and task management with role-based access",
    version=settings.service_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    """Log all requests with timing"""
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time

    response.headers["X-Process-Time"] = str(process_time)
    if request.url.path not in ["/health", "/"]:
        logger.info(f"{request.method} {request.url.path} - {response.status_code} ({process_time:.3f}s)")

    return response


def error_response(request: Request, status_code: int, content: dict, headers: dict = None) -> JSONResponse:
    content.update({"path": str(request.url.path), "timestamp": time.time()})
    return JSONResponse(status_code=status_code, content={"error": content}, headers=headers)


@app.exception_handler(TaskboardError)
async def taskboard_exception_handler(request: Request, exc: TaskboardError):
    """Map the error taxonomy onto HTTP statuses"""
    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}
    if isinstance(exc, InternalError):
        logger.error(f"Internal error on {request.method} {request.url.path}: {exc.cause or exc}")
        if not settings.debug:
            return error_response(request, exc.status_code, InternalError().to_dict())
    return error_response(request, exc.status_code, exc.to_dict(), headers=headers)


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies or parameters"""
    return error_response(request, 422, {
        "type": "request_validation_error",
        "status_code": 422,
        "message": "Request validation failed",
        "errors": [
            {"loc": list(error.get("loc", ())), "msg": error.get("msg", "")}
            for error in exc.errors()
        ],
    })


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions"""
    logger.exception(f"Unhandled exception: {exc}")
    return error_response(request, status.HTTP_500_INTERNAL_SERVER_ERROR, {
        "type": "internal_error",
        "status_code": 500,
        "message": "Internal server error" if not settings.debug else str(exc),
    })


# Include routers
app.include_router(auth.router, prefix=settings.api_prefix + "/auth", tags=["auth"])
app.include_router(users.router, prefix=settings.api_prefix + "/users", tags=["users"])
app.include_router(projects.router, prefix=settings.api_prefix + "/projects", tags=["projects"])
app.include_router(tasks.router, prefix=settings.api_prefix + "/tasks", tags=["tasks"])


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": settings.service_name,
        "version": settings.service_version,
        "status": "running",
        "message": "Taskboard is operational"
    }


@app.get("/health")
def health_check():
    """Health check endpoint"""
    db_healthy = check_db_connection()
    return {
        "service": settings.service_name,
        "version": settings.service_version,
        "status": "healthy" if db_healthy else "unhealthy",
        "database": "connected" if db_healthy else "disconnected",
        "timestamp": time.time()
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("taskboard.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
