from typing import Dict, Optional, Set
from fastapi import WebSocket
import asyncio
import logging

logger = logging.getLogger(__name__)

SCOPE_CLASS = "class"
SCOPE_GLOBAL = "global"


class Connection:
    def __init__(self, websocket: WebSocket):
        self.websocket = websocket
        self.class_code: Optional[str] = None
        self.user_id: Optional[str] = None
        self.role: Optional[str] = None

    @property
    def bound(self) -> bool:
        return self.class_code is not None

    def __repr__(self):
        return f"<Connection(role={self.role}, user_id={self.user_id}, class_code={self.class_code})>"


class ConnectionManager:
    def __init__(self, scope: str = SCOPE_CLASS):
        if scope not in (SCOPE_CLASS, SCOPE_GLOBAL):
            raise ValueError(f"Unknown broadcast scope: {scope}")
        self.scope = scope
        self.connections: Set[Connection] = set()
        # class_code -> set of bound Connection
        self.topics: Dict[str, Set[Connection]] = {}
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket) -> Connection:
        conn = Connection(websocket)
        async with self._lock:
            self.connections.add(conn)
        return conn

    async def bind(self, conn: Connection, class_code: str, role: str, user_id: Optional[str] = None):
        """Subscribe a connection to one class topic. Rebinding moves it."""
        async with self._lock:
            self._unsubscribe(conn)
            conn.class_code = class_code
            conn.role = role
            conn.user_id = user_id
            self.topics.setdefault(class_code, set()).add(conn)
        logger.info("Bound %r", conn)

    async def disconnect(self, conn: Connection):
        async with self._lock:
            self._unsubscribe(conn)
            self.connections.discard(conn)

    def _unsubscribe(self, conn: Connection):
        if conn.class_code in self.topics:
            self.topics[conn.class_code].discard(conn)
            if not self.topics[conn.class_code]:
                del self.topics[conn.class_code]

    def subscribers(self, class_code: str) -> Set[Connection]:
        return set(self.topics.get(class_code, ()))

    async def send(self, conn: Connection, event: str, data) -> bool:
        try:
            await conn.websocket.send_json({"event": event, "data": data})
            return True
        except Exception:
            # client went away; delivery is best-effort
            logger.debug("Dropped %s for %r", event, conn)
            return False

    async def broadcast(self, class_code: str, event: str, data):
        async with self._lock:
            if self.scope == SCOPE_GLOBAL:
                conns = [c for c in self.connections if c.bound]
            else:
                conns = list(self.topics.get(class_code, ()))
        stale = []
        for c in conns:
            if not await self.send(c, event, data):
                stale.append(c)
        for c in stale:
            await self.disconnect(c)
