from datetime import timedelta
from typing import Optional
import asyncio
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import Settings, load_settings
from routes.analysis import analysis_routes
from routes.classroom import session_routes, ws_routes
from services.analysis_gateway import AnalysisGateway
from services.errors import ClassroomError
from services.event_router import EventRouter
from services.logging_config import configure_logging
from services.presence_manager import PresenceManager
from services.session_store import SessionStore
from services.ws_manager import ConnectionManager

logger = logging.getLogger(__name__)


async def _reap_forever(store: SessionStore, max_idle: timedelta, interval: float):
    while True:
        await asyncio.sleep(interval)
        store.reap_idle(max_idle)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    # Create FastAPI app
    app = FastAPI(
        title="Classroom Live API",
        description="Live classroom sessions with real-time student text broadcast",
        version="1.0.0"
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # One set of services per app instance
    store = SessionStore()
    presence = PresenceManager(store)
    manager = ConnectionManager(scope=settings.broadcast_scope)
    app.state.settings = settings
    app.state.store = store
    app.state.presence = presence
    app.state.manager = manager
    app.state.event_router = EventRouter(presence, manager)
    app.state.gateway = AnalysisGateway(
        settings.gemini_api_key,
        settings.gemini_api_url,
        timeout=settings.analysis_timeout,
    )

    @app.exception_handler(ClassroomError)
    async def classroom_error_handler(request: Request, exc: ClassroomError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    # Health check endpoint
    @app.get("/health", tags=["Health"])
    def health_check():
        """
        Health check endpoint to verify server status
        """
        return {
            "status": "healthy",
            "message": "Server is running successfully",
            "classes": store.session_count(),
        }

    # Root endpoint
    @app.get("/", tags=["Root"])
    def read_root():
        return {
            "message": "Welcome to Classroom Live API",
            "docs": "/docs",
            "health": "/health",
            "websocket": "/ws",
        }

    # Register routers
    app.include_router(session_routes.router)
    app.include_router(analysis_routes.router)
    app.include_router(ws_routes.router)

    @app.on_event("startup")
    async def on_startup():
        if not settings.gemini_api_key:
            logger.warning("GEMINI_API_KEY is not set; /api/analyze-code will report errors")
        if settings.session_idle_hours > 0:
            app.state.reaper = asyncio.create_task(_reap_forever(
                store,
                timedelta(hours=settings.session_idle_hours),
                settings.reap_interval_seconds,
            ))
            logger.info("Reaping classes idle for more than %s hours", settings.session_idle_hours)

    @app.on_event("shutdown")
    async def on_shutdown():
        reaper = getattr(app.state, "reaper", None)
        if reaper is not None:
            reaper.cancel()

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    # Run on all IPs (0.0.0.0) to ensure accessibility
    uvicorn.run(app, host=app.state.settings.host, port=app.state.settings.port)
