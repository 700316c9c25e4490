"""Hotel Reservations FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from hotelres.api.v1.guests import router as guests_router
from hotelres.api.v1.reservations import router as reservations_router
from hotelres.api.v1.rooms import router as rooms_router
from hotelres.config import settings
from hotelres.database import dispose_engine
from hotelres.exceptions import (
    ConflictError,
    DuplicateError,
    InvalidStateError,
    NotFoundError,
    ReservationSystemError,
    ValidationError,
)
from hotelres.schemas.common import ApiResponse
from hotelres.store.memory import InMemoryStore

# Configure root logger so all hotelres.* loggers output to stderr.
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

ERROR_STATUS_CODES: dict[type[ReservationSystemError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    ConflictError: status.HTTP_400_BAD_REQUEST,
    DuplicateError: status.HTTP_400_BAD_REQUEST,
    InvalidStateError: status.HTTP_400_BAD_REQUEST,
    NotFoundError: status.HTTP_404_NOT_FOUND,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup and shutdown events."""
    # Startup
    if settings.storage_backend == "memory":
        app.state.memory_store = InMemoryStore()
        logger.info("Using in-memory storage; data is lost on restart")
    yield
    # Shutdown: dispose engine connections
    await dispose_engine()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Reservation management backend for a small hotel: guests, rooms and bookings.",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(guests_router)
app.include_router(rooms_router)
app.include_router(reservations_router)


# ---------------------------------------------------------------------------
# Error envelopes
# ---------------------------------------------------------------------------


def _envelope(status_code: int, body: ApiResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


@app.exception_handler(ReservationSystemError)
async def reservation_error_handler(request: Request, exc: ReservationSystemError) -> JSONResponse:
    status_code = next(
        (code for error_type, code in ERROR_STATUS_CODES.items() if isinstance(exc, error_type)),
        status.HTTP_400_BAD_REQUEST,
    )
    body = ApiResponse(success=False, message=exc.message)
    if isinstance(exc, ConflictError):
        body.data = {"conflicting_reservations": exc.conflicts}
    return _envelope(status_code, body)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return _envelope(
        status.HTTP_400_BAD_REQUEST,
        ApiResponse(success=False, message="Invalid request", error=details),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = "Route not found" if exc.status_code == status.HTTP_404_NOT_FOUND else str(exc.detail)
    return _envelope(exc.status_code, ApiResponse(success=False, message=message))


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _envelope(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ApiResponse(
            success=False,
            message="Something went wrong!",
            error=str(exc) if settings.debug else "Internal server error",
        ),
    )


@app.get("/health", tags=["health"])
async def health_check() -> dict:
    """Health check endpoint."""
    return {
        "success": True,
        "message": f"{settings.app_name} API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/", tags=["root"])
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run("hotelres.main:app", host=settings.host, port=settings.port, reload=settings.debug)
