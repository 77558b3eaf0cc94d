"""Event Check-in Kiosk Web Application."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from kiosk.core.config import settings
from kiosk.core.database import create_db_and_tables
from kiosk.routes import attendees, badges

# Configure logging
settings.log_dir.mkdir(parents=True, exist_ok=True)
log_file = settings.log_dir / "latest.log"

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    filename=str(log_file),
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown lifecycle."""
    logger.info("Starting Event Check-in Kiosk")
    create_db_and_tables()
    yield
    logger.info("Event Check-in Kiosk shut down")


app = FastAPI(
    title=settings.app_name,
    description="Self-service event check-in: search your name, check in, print your badge",
    version="0.1.0",
    lifespan=lifespan,
)

# Kiosk browsers may be served from a different origin than the API
origins = (
    ["*"]
    if settings.allowed_origins == "*"
    else [o.strip() for o in settings.allowed_origins.split(",")]
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(attendees.router)
app.include_router(badges.router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "app": settings.app_name}
