"""
CareShift - Main Application Entry Point
Shift tracking for care workers with geofenced work sites
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import structlog

from careshift import __version__
from careshift.core.config import get_settings
from careshift.core.database import create_db_engine, init_db
from careshift.core.events import EventBus
from careshift.core.exceptions import AuthenticationError, CareShiftError
from careshift.core.timeutils import utcnow
from careshift.geo.geofence import GeofenceTracker
from careshift.geo.positioning import SimulatedRoutes
from careshift.services.notifications import NotificationFeed, register_notification_handlers
from careshift.api import geofence, locations, shifts, users

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer()
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
)

logger = structlog.get_logger(__name__)
settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    logger.info("Initializing CareShift backend")
    engine = create_db_engine(get_settings())
    init_db(engine)

    app.state.engine = engine
    app.state.clock = utcnow
    app.state.geofence_tracker = GeofenceTracker(
        display_seconds=settings.GEOFENCE_NOTIFICATION_SECONDS
    )
    app.state.simulated_routes = SimulatedRoutes()
    app.state.notification_feed = NotificationFeed()

    event_bus = EventBus()
    register_notification_handlers(event_bus, app.state.notification_feed)
    app.state.event_bus = event_bus

    yield

    # Shutdown
    logger.info("Shutting down CareShift backend")
    engine.dispose()


# Create FastAPI application
app = FastAPI(
    title="CareShift API",
    description="Clock-in/clock-out for care workers with geofenced work sites",
    version=__version__,
    lifespan=lifespan,
)

# Configure middleware stack
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CareShiftError)
async def careshift_error_handler(request: Request, exc: CareShiftError):
    """Map domain errors to their HTTP status with the message as detail"""
    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}
    logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message},
        headers=headers,
    )


# Include routers
prefix = settings.API_V1_PREFIX
app.include_router(users.router, prefix=f"{prefix}/users", tags=["users"])
app.include_router(shifts.router, prefix=f"{prefix}/shifts", tags=["shifts"])
app.include_router(locations.router, prefix=f"{prefix}/locations", tags=["locations"])
app.include_router(geofence.router, prefix=f"{prefix}/geofence", tags=["geofence"])


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "careshift-api"}


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "CareShift API",
        "version": __version__,
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "careshift.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.ENVIRONMENT == "development",
        log_level="info",
    )
