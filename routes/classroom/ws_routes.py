from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
import logging

from deps import get_event_router, get_manager
from services.event_router import ERROR, EventRouter
from services.ws_manager import ConnectionManager

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/ws")
async def classroom_ws(
    websocket: WebSocket,
    manager: ConnectionManager = Depends(get_manager),
    events: EventRouter = Depends(get_event_router),
):
    """WebSocket endpoint for live classroom updates.
    The connection stays unbound until it sends `teacher_join` or `student_join`.
    """
    await websocket.accept()
    conn = await manager.connect(websocket)
    logger.info("A user connected")
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            if message.get("text") is None:
                await manager.send(conn, ERROR, {"error": "Frames must be text"})
                continue
            await events.handle_frame(conn, message["text"])
    except WebSocketDisconnect:
        pass
    finally:
        await manager.disconnect(conn)
        logger.info("A user disconnected (%r)", conn)
