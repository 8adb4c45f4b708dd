"""
WakeAdvisor - Small Craft Wake Advisories
Southbound freighter ETAs and low tide windows for the Hudson at Kingston
"""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.responses import HTMLResponse

from config import settings
from wakeadvisor.routes import freighter_routes

# Setup logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

TEMPLATE_PATH = Path(__file__).resolve().parent / "templates" / "index.html"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup/shutdown events
    """
    # Startup
    logger.info("🚀 WakeAdvisor Server Starting...")
    logger.info(f"Environment: {settings.ENV}")
    logger.info(f"Debug Mode: {settings.DEBUG}")
    logger.info(
        f"Reference point: {settings.REFERENCE_LAT}, {settings.REFERENCE_LON}, "
        f"course {settings.SOUTHBOUND_MIN}-{settings.SOUTHBOUND_MAX}°, "
        f"ETA {settings.ETA_WINDOW_MIN_MINUTES}-{settings.ETA_WINDOW_MAX_MINUTES} min"
    )

    if not settings.AISSTREAM_API_KEY:
        logger.warning("⚠️ AISSTREAM_API_KEY not set, freighter lookups will fail")

    yield

    # Shutdown
    logger.info("⛔ WakeAdvisor Server Shutting Down...")


# Create FastAPI app
app = FastAPI(
    title=settings.API_TITLE,
    description=settings.API_DESCRIPTION,
    version=settings.API_VERSION,
    lifespan=lifespan,
)

# Include routers
app.include_router(freighter_routes.router, prefix="/api", tags=["freighters"])


@app.get("/", response_class=HTMLResponse)
async def index():
    """Serve main page"""
    try:
        return TEMPLATE_PATH.read_text(encoding="utf-8")
    except FileNotFoundError:
        return "<h1>WakeAdvisor</h1><p>Visit /docs for API documentation</p>"


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "environment": settings.ENV,
        "service": "WakeAdvisor",
        "ais_configured": bool(settings.AISSTREAM_API_KEY),
    }


if __name__ == "__main__":
    import uvicorn

    # Run server with Uvicorn
    uvicorn.run(
        "app:app",
        host=settings.HOST,
        port=settings.PORT,
        workers=settings.WORKERS if settings.ENV == "production" else 1,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
