from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from database.mongodb import db
from config import get_settings
from routes import aircraft, components, predictions
import logging

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

settings = get_settings()

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifecycle manager for the app"""
    # Startup
    await db.connect(settings.mongo_url, settings.db_name)
    logger.info("SkyGuard Backend started")
    yield
    # Shutdown
    await db.disconnect()
    logger.info("SkyGuard Backend stopped")

# Create FastAPI app
app = FastAPI(
    title="SkyGuard API",
    description="Aircraft component tracking with maintenance due-date predictions",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(aircraft.router)
app.include_router(components.router)
app.include_router(predictions.router)

@app.get("/")
async def root():
    return {
        "message": "SkyGuard API",
        "version": "1.0.0",
        "status": "running"
    }

@app.get("/api")
async def api_root():
    return {
        "message": "SkyGuard API",
        "endpoints": {
            "aircraft": "/api/aircraft",
            "components": "/api/components",
            "predictions": "/api/predictions"
        }
    }

@app.get("/health")
async def health_check():
    return {"status": "healthy"}
