"""
VideoAPI - Main Application Entry Point
REST storage for cameras, videos, pictures, alerts and users
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.config import get_settings
from app.crud.errors import CrudError
from app.database import engine, init_db
from app.routers import (
    alert_router,
    auth_router,
    camera_router,
    health_router,
    hooks_router,
    picture_router,
    user_router,
    video_router,
)
from app.services.auth import create_default_admin
from app.services.stores import user_store

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    logger.info(f"🚀 Starting {settings.app_name}...")

    await init_db()
    logger.info("✅ Database initialized")

    await create_default_admin(user_store)

    settings.media_path.mkdir(parents=True, exist_ok=True)

    yield

    # Shutdown
    await engine.dispose()
    logger.info(f"👋 Shutting down {settings.app_name}...")


app = FastAPI(
    title=settings.app_name,
    description="REST storage for camera footage metadata, alerts and users",
    version="0.1.0",
    lifespan=lifespan
)

# CORS middleware for frontend communication
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure properly in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CrudError)
async def crud_error_handler(request: Request, exc: CrudError):
    """Render every API error as {"error": message}."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


# Include routers
app.include_router(health_router, prefix="/api")
app.include_router(auth_router, prefix="/api")
app.include_router(user_router, prefix="/api")
app.include_router(camera_router, prefix="/api")
app.include_router(video_router, prefix="/api")
app.include_router(picture_router, prefix="/api")
app.include_router(alert_router, prefix="/api")
app.include_router(hooks_router, prefix="/api")

# Uploaded media, read only
app.mount("/media", StaticFiles(directory=settings.media_path, check_dir=False), name="media")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": settings.app_name,
        "version": "0.1.0",
        "docs": "/docs",
        "health": "/api/health"
    }
