"""
Dispatch of client events arriving on a WebSocket connection.

Frames are JSON objects of the form {"event": <name>, "data": {...}}.
Mutations go through the presence manager and their results are fanned
out through the connection manager.
"""
from typing import Any, Dict
import json
import logging

from models.classroom.classroom_models import Role
from services.presence_manager import PresenceManager
from services.ws_manager import Connection, ConnectionManager

logger = logging.getLogger(__name__)

# client -> server
STUDENT_TEXT_UPDATE = "student_text_update"
TEACHER_JOIN = "teacher_join"
STUDENT_JOIN = "student_join"
PROBLEM_UPDATED = "problem_updated"
STUDENT_STATUS_UPDATE = "student_status_update"

# server -> client
TEXT_UPDATED = "text_updated"
ALL_STUDENTS_DATA = "all_students_data"
STUDENT_CURRENT_TEXT = "student_current_text"
PROBLEM_STATEMENT_UPDATED = "problem_statement_updated"
STUDENT_STATUS_CHANGED = "student_status_changed"
JOIN_FAILED = "join_failed"
ERROR = "error"


def _field(data: Dict[str, Any], key: str):
    value = data.get(key)
    return value if isinstance(value, str) else None


class EventRouter:
    def __init__(self, presence: PresenceManager, manager: ConnectionManager):
        self.presence = presence
        self.manager = manager
        self._handlers = {
            STUDENT_TEXT_UPDATE: self.on_student_text_update,
            TEACHER_JOIN: self.on_teacher_join,
            STUDENT_JOIN: self.on_student_join,
            PROBLEM_UPDATED: self.on_problem_updated,
            STUDENT_STATUS_UPDATE: self.on_student_status_update,
        }

    async def handle_frame(self, conn: Connection, raw: str):
        try:
            payload = json.loads(raw)
        except ValueError:
            await self.manager.send(conn, ERROR, {"error": "Invalid JSON"})
            return
        if not isinstance(payload, dict):
            await self.manager.send(conn, ERROR, {"error": "Frame must be an object"})
            return
        await self.dispatch(conn, payload.get("event"), payload.get("data"))

    async def dispatch(self, conn: Connection, event: Any, data: Any):
        handler = self._handlers.get(event) if isinstance(event, str) else None
        if handler is None:
            logger.debug("Unknown event %r from %r", event, conn)
            await self.manager.send(conn, ERROR, {"error": f"Unknown event: {event}"})
            return
        if not isinstance(data, dict):
            data = {}
        await handler(conn, data)

    async def on_student_text_update(self, conn: Connection, data: Dict[str, Any]):
        text = data.get("text")
        if not isinstance(text, str):
            return
        seq = data.get("seq")
        if not isinstance(seq, int) or isinstance(seq, bool):
            seq = None
        out = self.presence.update_text(_field(data, "studentId"), _field(data, "classCode"), text, seq)
        if out is not None:
            await self.manager.broadcast(out["classCode"], TEXT_UPDATED, out)

    async def on_teacher_join(self, conn: Connection, data: Dict[str, Any]):
        class_code = _field(data, "classCode")
        snapshot = self.presence.teacher_snapshot(class_code)
        if snapshot is None:
            await self.manager.send(conn, JOIN_FAILED, {
                "role": Role.teacher.value,
                "classCode": class_code,
                "error": "Class not found",
            })
            return
        await self.manager.bind(conn, class_code, Role.teacher.value, _field(data, "teacherId"))
        await self.manager.send(conn, ALL_STUDENTS_DATA, snapshot)

    async def on_student_join(self, conn: Connection, data: Dict[str, Any]):
        student_id = _field(data, "studentId")
        class_code = _field(data, "classCode")
        snapshot = self.presence.student_snapshot(student_id, class_code)
        if snapshot is None:
            await self.manager.send(conn, JOIN_FAILED, {
                "role": Role.student.value,
                "classCode": class_code,
                "error": "Student not found in class",
            })
            return
        await self.manager.bind(conn, class_code, Role.student.value, student_id)
        await self.manager.send(conn, STUDENT_CURRENT_TEXT, snapshot)

    async def on_problem_updated(self, conn: Connection, data: Dict[str, Any]):
        # an explicit null clears the statement; a missing or non-string value is ignored
        if "problemStatement" not in data:
            return
        problem = data["problemStatement"]
        if problem is not None and not isinstance(problem, str):
            return
        out = self.presence.update_problem(_field(data, "classCode"), problem)
        if out is not None:
            await self.manager.broadcast(out["classCode"], PROBLEM_STATEMENT_UPDATED, out)

    async def on_student_status_update(self, conn: Connection, data: Dict[str, Any]):
        out = self.presence.update_status(_field(data, "studentId"), _field(data, "classCode"), _field(data, "status"))
        if out is not None:
            await self.manager.broadcast(out["classCode"], STUDENT_STATUS_CHANGED, out)
