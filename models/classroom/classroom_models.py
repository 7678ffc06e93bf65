from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional
import enum


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StudentStatus(enum.Enum):
    working = "working"
    done = "done"
    error = "error"


class Role(enum.Enum):
    teacher = "teacher"
    student = "student"


@dataclass
class StudentRecord:
    id: str
    name: str
    class_code: str
    join_time: datetime = field(default_factory=utcnow)
    status: StudentStatus = StudentStatus.working

    def to_dict(self, current_text: str = "") -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "joinTime": self.join_time.isoformat().replace("+00:00", "Z"),
            "classCode": self.class_code,
            "status": self.status.value,
            "currentText": current_text,
        }

    def __repr__(self):
        return f"<StudentRecord(id={self.id}, name={self.name}, class_code={self.class_code}, status={self.status.value})>"


@dataclass
class ClassroomSession:
    class_code: str
    teacher_id: str
    students: List[StudentRecord] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)
    last_activity: datetime = field(default_factory=utcnow)
    active: bool = True
    problem_statement: Optional[str] = None

    def find_student(self, student_id: str) -> Optional[StudentRecord]:
        for student in self.students:
            if student.id == student_id:
                return student
        return None

    def touch(self):
        self.last_activity = utcnow()

    def __repr__(self):
        return f"<ClassroomSession(class_code={self.class_code}, teacher_id={self.teacher_id}, students={len(self.students)}, active={self.active})>"


@dataclass
class RosterEntry:
    """A roster row paired with the student's live text."""

    student: StudentRecord
    current_text: str = ""

    def to_dict(self) -> dict:
        return self.student.to_dict(self.current_text)
