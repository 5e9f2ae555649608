"""Party Planner Web Application."""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.database import database
from app.core.errors import DatabaseError, InitializationError, NotFoundError
from app.core.persistence import bridge
from app.core.scheduler import shutdown_scheduler, start_scheduler
from app.core.session import PartySession
from app.core.storage import storage
from app.routes import calculations, data, guests, itinerary, parties, session, timeline, todos

# Configure logging
log_dir = Path(settings.log_dir).expanduser()
log_dir.mkdir(parents=True, exist_ok=True)
log_file = log_dir / "latest.log"

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    filename=str(log_file),
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown lifecycle."""
    # Startup; a failed migration aborts here
    logger.info("Starting Party Planner application")
    bridge.initialize()
    app.state.party_session = PartySession.load(storage)
    start_scheduler()
    yield
    # Shutdown
    shutdown_scheduler()
    app.state.party_session.save(storage)
    bridge.shutdown()
    logger.info("Party Planner application shut down")


app = FastAPI(
    title=settings.app_name,
    description="Plan parties: guests, timeline, todos, itinerary and food and drink estimates",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS for external access
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


@app.exception_handler(DatabaseError)
async def database_error_handler(request: Request, exc: DatabaseError):
    """Turn data layer failures into JSON errors instead of crashing the request."""
    if isinstance(exc, NotFoundError):
        status_code = 404
    elif isinstance(exc, InitializationError):
        status_code = 503
    else:
        status_code = 400
    return JSONResponse(status_code=status_code, content={"detail": exc.message, "code": exc.code})


# Include routers
app.include_router(parties.router)
app.include_router(guests.router)
app.include_router(timeline.router)
app.include_router(todos.router)
app.include_router(itinerary.router)
app.include_router(calculations.router)
app.include_router(data.router)
app.include_router(session.router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "app": settings.app_name, "database_ready": database.is_ready}
