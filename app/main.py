import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from starlette import status
from app.database import Base, SessionLocal, engine
from app.config import settings
from app import models
from app.limits import limiter, RateLimitExceeded, SlowAPIMiddleware
from app.services.auth_service import ensure_admin_user
from app.services.cache_service import CategoryCache
from slowapi import _rate_limit_exceeded_handler

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


from app.routers import (
    auth,
    admin,
    categories,
    properties,
    images,
    contact,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    os.makedirs(settings.UPLOAD_PATH, exist_ok=True)
    db = SessionLocal()
    try:
        ensure_admin_user(db, settings.ADMIN_USERNAME, settings.ADMIN_PASSWORD)
    finally:
        db.close()
    logger.info("Application started")
    yield
    logger.info("Shutting down")


app = FastAPI(lifespan=lifespan)

# One snapshot per process; handlers reach it through get_category_cache
app.state.category_cache = CategoryCache(
    ttl_seconds=settings.CATEGORIES_CACHE_TTL_SECONDS
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Rate limiting middleware and handler
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
):
    """Report missing or malformed fields as 400 with a readable message"""
    messages = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ())[1:])
        message = error.get("msg", "Invalid value").removeprefix("Value error, ")
        messages.append(f"{field}: {message}" if field else message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "; ".join(messages), "error": "validation_error"},
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    """Handle general SQLAlchemy errors"""
    logger.error(f"Database error: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error occurred", "error": "database_error"},
    )


# Note: In production, disable this and use Alembic migrations instead
if settings.DATABASE_URL.startswith("sqlite"):
    Base.metadata.create_all(bind=engine)


@app.get("/healthy", status_code=status.HTTP_200_OK)
def health_check():
    return {"status": "Healthy"}


app.include_router(auth.router)
app.include_router(admin.router)
app.include_router(categories.router)
app.include_router(properties.router)
app.include_router(images.router)
app.include_router(contact.router)

app.mount(
    "/uploads",
    StaticFiles(directory=settings.UPLOAD_PATH, check_dir=False),
    name="uploads",
)
