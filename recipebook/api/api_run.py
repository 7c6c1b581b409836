from typing import Optional
import logging

from fastapi import FastAPI, Query

from recipebook.api.dependencies import close_backend
from recipebook.api.routes import plan, recipes
from recipebook.events.web_observers import start as start_event_observers, get_events as get_web_events

# Logging
logger = logging.getLogger("recipebook_app")

# Initialize FastAPI app
app = FastAPI(title="Recipe Book & Meal Plan API")

# Include routers
app.include_router(recipes.router)
app.include_router(plan.router)


@app.on_event("startup")
def _startup_web_observers():
    """Register event bus subscribers for storage alerts when the app starts."""
    start_event_observers()
    logger.info("Web observers for storage events started")


@app.on_event("shutdown")
async def _shutdown_backend():
    """Close the remote HTTP client (no-op for the local store)."""
    await close_backend()


@app.get('/api/events')
def api_storage_events(
    since: Optional[int] = Query(default=None, description="Return events with id greater than this value")
):
    """
    Return recent storage alert events (write rejected, cache reset, partial plan replace).

    Client polling strategy:
        1. First call without 'since' to load current backlog.
        2. Store 'next_cursor' from response.
        3. Subsequent polls: /api/events?since=<next_cursor>
    """
    return get_web_events(since)


@app.get('/api/health')
def health():
    return {"status": "ok"}
