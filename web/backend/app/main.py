from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, HTMLResponse
from fastapi.staticfiles import StaticFiles

from .api import games, health
from .config import Settings, settings
from .services.session import SessionManager

logging.basicConfig(level=settings.log_level.upper())
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lifespan: session sweeper runs for as long as the server is up
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    session_manager: SessionManager = app.state.session_manager
    logger.info(
        "Sessions expire after %ss idle; sweeping every %ss",
        session_manager.ttl_seconds, session_manager.cleanup_interval,
    )
    sweeper = asyncio.create_task(session_manager.cleanup_loop())
    try:
        yield
    finally:
        sweeper.cancel()
        try:
            await sweeper
        except asyncio.CancelledError:
            pass
        logger.info("Shut down with %d live session(s)", len(session_manager))


# ---------------------------------------------------------------------------
# Frontend: built board UI, or a hint that only the JSON API is up
# ---------------------------------------------------------------------------

def _frontend_dir(config: Settings) -> Path:
    if config.frontend_dist:
        return Path(config.frontend_dist)
    return Path(__file__).parents[2] / "frontend" / "dist"


def _mount_frontend(app: FastAPI, dist: Path) -> None:
    if (dist / "assets").exists():
        app.mount("/assets", StaticFiles(directory=dist / "assets"), name="board-assets")

    def index() -> FileResponse | HTMLResponse:
        page = dist / "index.html"
        if page.exists():
            return FileResponse(page)
        return HTMLResponse(
            f"<p>No board UI at <code>{dist}</code>. The game API is served under "
            "<code>/api/games</code>.</p>",
            status_code=503,
        )

    @app.get("/", include_in_schema=False)
    async def serve_root():
        return index()

    # Registered last so it never shadows /api routes.
    @app.get("/{full_path:path}", include_in_schema=False)
    async def serve_spa(full_path: str):
        return index()


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------

def create_app(config: Settings = settings) -> FastAPI:
    app = FastAPI(
        title="Sternhalma API",
        description="Chinese Checkers sessions: create a table, list legal moves, play them.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.session_manager = SessionManager.from_settings(config)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(health.router, prefix="/api")
    app.include_router(games.router, prefix="/api")
    _mount_frontend(app, _frontend_dir(config))
    return app


app = create_app()
