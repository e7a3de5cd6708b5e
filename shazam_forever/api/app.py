"""FastAPI app, CORS, and route registration."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Configure logging in the worker process (so orchestrator INFO logs are visible with uvicorn --reload)
logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(name)s: %(message)s",
)

from shazam_forever.api.state import AppState, get_state
from shazam_forever.config import APP_TITLE, load_settings

# Import routes after state to avoid circular imports
from shazam_forever.api.routes import session, sessions

__all__ = ["app", "AppState", "get_state"]

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Missing PACKAGE_NAME / MENTRAOS_API_KEY / PORT aborts startup
    settings = load_settings()
    app.state.settings = settings
    logger.info("%s app initialized (package %s)", APP_TITLE, settings.package_name)

    yield

    get_state().close_all()


app = FastAPI(
    title=f"{APP_TITLE} API",
    description="Continuous song recognition for smart-glasses audio sessions",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(session.router, prefix="/ws", tags=["session"])
app.include_router(sessions.router, prefix="/api/sessions", tags=["sessions"])


@app.get("/health")
def health():
    settings = getattr(app.state, "settings", None)
    return {"status": "ok", "package": settings.package_name if settings else None}
