from starlette.requests import HTTPConnection

from services.analysis_gateway import AnalysisGateway
from services.event_router import EventRouter
from services.presence_manager import PresenceManager
from services.session_store import SessionStore
from services.ws_manager import ConnectionManager


# Dependencies to get the per-app services (built in main.create_app)
def get_store(conn: HTTPConnection) -> SessionStore:
    return conn.app.state.store


def get_presence(conn: HTTPConnection) -> PresenceManager:
    return conn.app.state.presence


def get_manager(conn: HTTPConnection) -> ConnectionManager:
    return conn.app.state.manager


def get_event_router(conn: HTTPConnection) -> EventRouter:
    return conn.app.state.event_router


def get_gateway(conn: HTTPConnection) -> AnalysisGateway:
    return conn.app.state.gateway
