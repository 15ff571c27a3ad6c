"""Flashcards API."""
from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from flashcards.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    from flashcards.database import Base, engine, ensure_database_directory

    # Import all models so they're registered with Base
    from flashcards import models  # noqa: F401

    ensure_database_directory()
    Base.metadata.create_all(bind=engine)
    logger.info(f"{settings.app_name} started")
    yield


app = FastAPI(
    title=settings.app_name,
    description="Study decks of flashcards and review concepts",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "app": settings.app_name}


# Import and include routers
from flashcards.api import auth, flash_review, study, users  # noqa: E402
from flashcards.api.errors import register_exception_handlers  # noqa: E402

register_exception_handlers(app)

app.include_router(auth.router, prefix="/api/v1")
app.include_router(users.router, prefix="/api/v1")
app.include_router(study.router, prefix="/api/v1")
app.include_router(flash_review.router, prefix="/api/v1")
