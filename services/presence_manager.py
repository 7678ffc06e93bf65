"""Request-shaped membership operations on top of the session store."""

from typing import Optional
import logging

from services.errors import ClassroomError, NotFoundError
from services.id_generator import new_opaque_id
from services.session_store import SessionStore, parse_status

logger = logging.getLogger(__name__)


class PresenceManager:
    """Creates teachers and students, and builds the payloads viewers receive."""

    def __init__(self, store: SessionStore):
        self.store = store

    def create_teacher(self) -> dict:
        teacher_id = new_opaque_id("teacher")
        class_code = self.store.create_session(teacher_id)
        return {"teacherId": teacher_id, "classCode": class_code}

    def create_student(self, class_code: str, name: Optional[str] = None) -> dict:
        student = self.store.add_student(class_code, name)
        return {"studentId": student.id, "classCode": class_code}

    def end_class(self, class_code: str, teacher_id: str) -> None:
        self.store.end_session(class_code, teacher_id)

    # Join-time hydration

    def teacher_snapshot(self, class_code: str) -> Optional[dict]:
        try:
            roster = self.store.get_roster(class_code)
            problem = self.store.get_problem_statement(class_code)
        except NotFoundError:
            return None
        return {
            "classCode": class_code,
            "students": [entry.to_dict() for entry in roster],
            "problemStatement": problem,
        }

    def student_snapshot(self, student_id: str, class_code: str) -> Optional[dict]:
        try:
            self.store.find_student(class_code, student_id)
            problem = self.store.get_problem_statement(class_code)
        except NotFoundError:
            return None
        return {
            "studentId": student_id,
            "text": self.store.get_text(student_id) or "",
            "problemStatement": problem,
        }

    # Mutations driven by connection events. Each returns the payload to
    # broadcast, or None when the identifiers do not resolve.

    def update_text(self, student_id: str, class_code: str, text: str, seq: Optional[int] = None) -> Optional[dict]:
        try:
            self.store.find_student(class_code, student_id)
            applied = self.store.set_text(student_id, text, seq)
        except NotFoundError:
            return None
        if not applied:
            logger.debug("Dropped stale text update for %s (seq=%s)", student_id, seq)
            return None
        return {"studentId": student_id, "classCode": class_code, "text": text}

    def update_status(self, student_id: str, class_code: str, status) -> Optional[dict]:
        try:
            student = self.store.set_student_status(class_code, student_id, parse_status(status))
        except ClassroomError:
            return None
        return {"studentId": student_id, "classCode": class_code, "status": student.status.value}

    def update_problem(self, class_code: str, problem_statement: Optional[str]) -> Optional[dict]:
        try:
            self.store.update_problem_statement(class_code, problem_statement)
        except NotFoundError:
            return None
        return {"classCode": class_code, "problemStatement": problem_statement}
