"""FastAPI application entry point."""
import logging
from pathlib import Path
from urllib.parse import urlparse

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from event_admin.config import settings
from event_admin.database import Base, engine
from event_admin.store.base import StoreError

# Import routers
from event_admin.routers import (
    companies,
    event_categories,
    events,
    flyers,
    meeting_categories,
    meetings,
    participants,
    views,
)

# Import all models so Base.metadata knows about them
from event_admin.models.event import Event                              # noqa: F401
from event_admin.models.category import MeetingCategory, EventCategory  # noqa: F401
from event_admin.models.organizer import EventOrganizingMeetingCategory, EventOrganizingCategory  # noqa: F401
from event_admin.models.attendee import EventAttendee, EventInvitee      # noqa: F401
from event_admin.models.participant import Participant, ParticipantMeetingCategory  # noqa: F401
from event_admin.models.meeting import Meeting                          # noqa: F401
from event_admin.models.company import Company                          # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Event Admin",
    description="Administration of events, meeting categories, event categories and their participants",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(events.router, prefix="/api/events", tags=["Events"])
app.include_router(meeting_categories.router, prefix="/api/meeting-categories", tags=["MeetingCategories"])
app.include_router(event_categories.router, prefix="/api/event-categories", tags=["EventCategories"])
app.include_router(participants.router, prefix="/api/participants", tags=["Participants"])
app.include_router(meetings.router, prefix="/api/meetings", tags=["Meetings"])
app.include_router(flyers.router, prefix="/api/flyers", tags=["Flyers"])
app.include_router(companies.router, prefix="/api/companies", tags=["Companies"])
app.include_router(views.router, prefix="/api/views", tags=["Views"])

# Serve uploaded flyers at the path their public URLs point to
FLYER_MOUNT_PATH = urlparse(settings.FLYER_PUBLIC_BASE_URL).path.rstrip("/") or "/"
Path(settings.FLYER_STORAGE_DIR).mkdir(parents=True, exist_ok=True)
app.mount(FLYER_MOUNT_PATH, StaticFiles(directory=settings.FLYER_STORAGE_DIR), name="flyers")


@app.exception_handler(StoreError)
def store_error_handler(request: Request, exc: StoreError):
    logger.error("Store call on %s failed: %s", exc.table or "?", exc)
    return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content={"detail": str(exc)})


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}
