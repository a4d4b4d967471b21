"""
HealthHub - FastAPI Application

Main application entry point with API endpoints for:
- Patients, providers and appointments
- Vital signs, lab results and scored health scans
- Symptom, drug interaction and risk analysis
- Doctor consultations and medication tracking
- The generative health assistant
"""
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from healthhub import __version__
from healthhub.api.routes import ROUTERS
from healthhub.config import settings
from healthhub.core.store import HealthDatabase
from healthhub.services import HealthAPI
from healthhub.utils import get_logger, setup_logging

logger = get_logger(__name__)

START_TIME = datetime.now()


# ---- Application Lifespan ----

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the store and facade: startup → yield → shutdown."""
    setup_logging(settings.log_level, settings.log_file)

    db = HealthDatabase()
    if settings.seed_sample_data:
        db.seed_sample_data()

    app.state.db = db
    app.state.health_api = HealthAPI(db)

    logger.info("API ready to accept requests")
    yield

    db.clear()
    logger.info(f"{settings.app_name} shut down.")


# ---- FastAPI Application ----

app = FastAPI(
    title=settings.app_name,
    description="Patient records, rule-based health analysis and telemedicine backend",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for router in ROUTERS:
    app.include_router(router, prefix="/api/v1")


# ---- Health Endpoints ----

def _health() -> dict:
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": __version__,
        "timestamp": datetime.now().isoformat(),
        "uptime_seconds": (datetime.now() - START_TIME).total_seconds(),
    }


@app.get("/", tags=["Health"])
async def root():
    """API root - health check."""
    return _health()


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint, including store counts."""
    body = _health()
    db = getattr(app.state, "db", None)
    if db is not None:
        body["store"] = db.stats()
    return body


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("healthhub.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
