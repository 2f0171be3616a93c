"""Blackstar API - Main application entry point."""
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from app.api import api_router
from app.api.health import router as health_router
from app import __version__
from app.config import settings
from app.database import init_db
from app.logging_config import setup_logging
from app.utils.paths import ensure_directory

# Initialize logging
setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown events."""
    # Startup
    ensure_directory(Path(settings.storage_root))
    init_db()
    yield
    # Shutdown (nothing needed)


app = FastAPI(
    title="Blackstar Releases",
    description="Release submission and editorial review for the label",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS middleware
# In production, set BLACKSTAR_CORS_ORIGINS to your domain(s)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")

# Include health routes (not under /api prefix)
app.include_router(health_router)

# Stored media, served where LocalBlobStore URLs point
app.mount(
    settings.media_url_prefix,
    StaticFiles(directory=settings.storage_root, check_dir=False),
    name="media",
)


@app.get("/")
def root():
    """Root endpoint - API info."""
    return {
        "name": "Blackstar Releases",
        "version": __version__,
        "docs": "/docs",
    }
