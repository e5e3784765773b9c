"""
FastAPI entrypoint for the Narumate backend application.
"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from narumate.core.config import settings
from narumate.api.router import api_router
from narumate.db.session import init_db

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

# Disable verbose SQLAlchemy logging
logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
logging.getLogger('sqlalchemy.pool').setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if init_db():
        logger.info("Database tables ready")
    else:
        logger.warning("Running in local mode: conversations and moods will not be saved")
    yield


app = FastAPI(
    title="Narumate API",
    description="AI chat assistant with a personal mood journal",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"message": "Narumate API is running"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "persistence_enabled": settings.persistence_enabled
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "narumate.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
