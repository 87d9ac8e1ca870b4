import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from swipematch.api.v1.api import api_router
from swipematch.core.config import settings
from swipematch.db.init_db import init_database
from swipematch.db.mongodb import mongodb
from swipematch.services import get_profile_store

# Configure logging
logging.basicConfig(level=logging.DEBUG if settings.DEBUG else settings.LOG_LEVEL)

# Suppress DEBUG logs from external libraries
logging.getLogger("pymongo").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting application lifespan with %s profile store", settings.STORE_BACKEND)
    uses_mongo = settings.STORE_BACKEND == "mongo"
    if uses_mongo:
        await mongodb.connect_to_mongo()
        await init_database()
        logger.info("Database initialized")

    try:
        yield
    finally:
        # Shutdown
        if uses_mongo:
            await mongodb.close_mongo_connection()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Matchmaking engine where friends swipe on candidates for each other",
    version="0.1.0",
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

# Set up CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API router
app.include_router(api_router, prefix=settings.API_V1_STR)

# Export app for use in other modules
__all__ = ["app"]


@app.get("/")
async def root():
    return {"message": f"{settings.PROJECT_NAME} is running"}


@app.get("/health")
async def health_check():
    """Health check endpoint that verifies the profile store"""
    health_status = {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat(), "components": {}}

    component = settings.STORE_BACKEND
    try:
        if await get_profile_store().ping():
            health_status["components"][component] = "healthy"
        else:
            health_status["components"][component] = "unhealthy"
            health_status["status"] = "unhealthy"
    except Exception as e:
        health_status["components"][component] = f"unhealthy: {str(e)}"
        health_status["status"] = "unhealthy"

    return health_status
