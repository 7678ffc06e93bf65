"""
In-memory store for classroom sessions, rosters and live student text.

One instance is created per application and shared by the HTTP routes and
the WebSocket handlers. Sync routes run in a thread pool, so every
read-modify-write happens under a single re-entrant lock.
"""
from datetime import datetime, timedelta
from typing import Dict, List, Optional
import logging
import threading

from models.classroom.classroom_models import ClassroomSession, RosterEntry, StudentRecord, StudentStatus, utcnow
from services.errors import AuthorizationError, NotFoundError, ValidationError
from services.id_generator import new_class_code, new_opaque_id

logger = logging.getLogger(__name__)

INVALID_CLASS_CODE = "Invalid or expired class code"


def parse_status(value) -> StudentStatus:
    if isinstance(value, StudentStatus):
        return value
    try:
        return StudentStatus(value)
    except ValueError:
        raise ValidationError(f"Invalid status: {value}")


class SessionStore:
    def __init__(self):
        self._sessions: Dict[str, ClassroomSession] = {}
        self._students: Dict[str, StudentRecord] = {}
        self._texts: Dict[str, str] = {}
        self._text_seq: Dict[str, int] = {}
        self._lock = threading.RLock()

    # Sessions

    def create_session(self, teacher_id: str) -> str:
        with self._lock:
            class_code = new_class_code(self.has_class_code)
            self._sessions[class_code] = ClassroomSession(class_code=class_code, teacher_id=teacher_id)
        logger.info("Created class %s for teacher %s", class_code, teacher_id)
        return class_code

    def has_class_code(self, class_code: str) -> bool:
        with self._lock:
            return class_code in self._sessions

    def session_count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def get_session(self, class_code: str) -> ClassroomSession:
        with self._lock:
            session = self._sessions.get(class_code)
            if session is None:
                raise NotFoundError("Class not found")
            return session

    def _owned_session(self, class_code: str, teacher_id: str) -> ClassroomSession:
        session = self.get_session(class_code)
        if session.teacher_id != teacher_id:
            raise AuthorizationError("Unauthorized")
        return session

    def end_session(self, class_code: str, teacher_id: str) -> None:
        with self._lock:
            session = self._owned_session(class_code, teacher_id)
            session.active = False
            session.touch()
        logger.info("Class %s closed to new students", class_code)

    # Problem statement

    def get_problem_statement(self, class_code: str) -> Optional[str]:
        with self._lock:
            return self.get_session(class_code).problem_statement

    def set_problem_statement(self, class_code: str, teacher_id: str, text: Optional[str]) -> None:
        with self._lock:
            session = self._owned_session(class_code, teacher_id)
            session.problem_statement = text
            session.touch()

    def update_problem_statement(self, class_code: str, text: Optional[str]) -> None:
        """Overwrite the problem statement without checking the teacher id."""
        with self._lock:
            session = self.get_session(class_code)
            session.problem_statement = text
            session.touch()

    # Students

    def add_student(self, class_code: str, name: Optional[str] = None) -> StudentRecord:
        with self._lock:
            session = self._sessions.get(class_code)
            if session is None or not session.active:
                raise ValidationError(INVALID_CLASS_CODE)
            student = StudentRecord(
                id=new_opaque_id("student"),
                name=name or f"Student {len(session.students) + 1}",
                class_code=class_code,
            )
            session.students.append(student)
            session.touch()
            self._students[student.id] = student
            self._texts[student.id] = ""
        logger.info("Student %s joined class %s", student.id, class_code)
        return student

    def get_student(self, student_id: str) -> Optional[StudentRecord]:
        with self._lock:
            return self._students.get(student_id)

    def find_student(self, class_code: str, student_id: str) -> StudentRecord:
        with self._lock:
            student = self.get_session(class_code).find_student(student_id)
            if student is None:
                raise NotFoundError("Student not found")
            return student

    def set_student_status(self, class_code: str, student_id: str, status) -> StudentRecord:
        with self._lock:
            student = self.find_student(class_code, student_id)
            student.status = parse_status(status)
            self._sessions[class_code].touch()
            return student

    def get_roster(self, class_code: str) -> List[RosterEntry]:
        with self._lock:
            session = self.get_session(class_code)
            return [RosterEntry(student=s, current_text=self._texts.get(s.id, "")) for s in session.students]

    # Live text

    def get_text(self, student_id: str) -> Optional[str]:
        with self._lock:
            return self._texts.get(student_id)

    def set_text(self, student_id: str, text: str, seq: Optional[int] = None) -> bool:
        """
        Overwrite a student's text. Returns False when `seq` is given and is
        not newer than the last applied sequence number.
        """
        with self._lock:
            if student_id not in self._texts:
                raise NotFoundError("Student not found")
            if seq is not None:
                last = self._text_seq.get(student_id)
                if last is not None and seq <= last:
                    return False
                self._text_seq[student_id] = seq
            self._texts[student_id] = text
            session = self._sessions.get(self._students[student_id].class_code)
            if session is not None:
                session.touch()
            return True

    # Expiry

    def reap_idle(self, max_idle: timedelta, now: Optional[datetime] = None) -> List[str]:
        now = now or utcnow()
        cutoff = now - max_idle
        with self._lock:
            expired = [code for code, s in self._sessions.items() if s.last_activity < cutoff]
            for code in expired:
                session = self._sessions.pop(code)
                for student in session.students:
                    self._students.pop(student.id, None)
                    self._texts.pop(student.id, None)
                    self._text_seq.pop(student.id, None)
        if expired:
            logger.info("Reaped %d idle classes: %s", len(expired), ", ".join(expired))
        return expired
