# storefront/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from storefront.core.config import get_settings
from storefront.core.exceptions import (
    CartConflictError,
    InsufficientStockError,
    InvalidArgumentError,
    NotFoundError,
    StorefrontError,
)
from storefront.database import create_db_and_tables

# Routers
from storefront.routers.profile import router as profile_router
from storefront.routers.products import router as products_router
from storefront.routers.cart import router as cart_router

settings = get_settings()

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("uvicorn")

# Domain error -> HTTP status. First match wins.
ERROR_STATUS: list[tuple[type[StorefrontError], int]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (InvalidArgumentError, status.HTTP_400_BAD_REQUEST),
    (InsufficientStockError, status.HTTP_400_BAD_REQUEST),
    (CartConflictError, status.HTTP_409_CONFLICT),
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Verify DB connectivity and create tables.
    """
    logger.info("Startup: connecting to database...")
    try:
        create_db_and_tables()
        logger.info("Startup: DB connection OK, tables verified.")
    except Exception as e:
        logger.error(f"Startup: DB connection FAILED: {e}")
        raise
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError):
    status_code = status.HTTP_400_BAD_REQUEST
    for error_cls, code in ERROR_STATUS:
        if isinstance(exc, error_cls):
            status_code = code
            break

    logger.info(f"{request.method} {request.url.path} -> {status_code}: {exc!r}")
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


# Versioned API prefix, e.g. /api/v1
app.include_router(profile_router, prefix=settings.API_V1_STR)
app.include_router(products_router, prefix=settings.API_V1_STR)
app.include_router(cart_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "storefront-backend"}
