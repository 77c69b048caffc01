import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from mangum import Mangum
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.routes import router as api_router
from config.logging_config import setup_logging
from config.settings import settings
from db.exceptions import JoblyError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Configure logging on startup."""
    setup_logging()
    logger.info("Jobly API starting up")
    yield
    logger.info("Jobly API shutting down")


app = FastAPI(
    title="Jobly API",
    description="Companies and job postings with filtered search",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Error responses: {"error": {"message": ..., "status": ...}}
# =============================================================================

def error_response(status_code: int, message, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"message": message, "status": status_code}},
        headers=headers,
    )


@app.exception_handler(JoblyError)
async def jobly_error_handler(request: Request, exc: JoblyError) -> JSONResponse:
    """ValidationError / ConflictError -> 400, NotFoundError -> 404."""
    if exc.status < 500:
        logger.warning(f"{request.method} {request.url.path} -> {exc.status}: {exc.message}")
    return error_response(exc.status, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed body, path or query values are a 400 (not FastAPI's 422)."""
    messages = [
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in exc.errors()
    ]
    logger.warning(f"{request.method} {request.url.path} -> 400: {messages}")
    return error_response(400, messages)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, exc.detail, headers=getattr(exc, "headers", None))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything else (store unreachable, bad SQL, ...) is an opaque 500."""
    logger.exception(f"{request.method} {request.url.path} failed")
    return error_response(500, "Internal Server Error")


# Include routers
app.include_router(api_router)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


# Lambda handler
handler = Mangum(app, lifespan="off")
