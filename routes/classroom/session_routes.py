from fastapi import APIRouter, Depends, status
from typing import List, Optional
from pydantic import BaseModel

from deps import get_manager, get_presence, get_store
from services.event_router import PROBLEM_STATEMENT_UPDATED, STUDENT_STATUS_CHANGED
from services.presence_manager import PresenceManager
from services.session_store import SessionStore
from services.ws_manager import ConnectionManager

router = APIRouter(tags=["Classroom Sessions"])


# Pydantic Schemas
class TeacherOut(BaseModel):
	teacherId: str
	classCode: str

class StudentCreate(BaseModel):
	classCode: str
	name: Optional[str] = None

class StudentCreated(BaseModel):
	studentId: str
	classCode: str

class StudentOut(BaseModel):
	id: str
	name: str
	joinTime: str
	classCode: str
	status: str
	currentText: str

class ProblemUpdate(BaseModel):
	teacherId: str
	problemStatement: Optional[str] = None

class ProblemOut(BaseModel):
	problemStatement: Optional[str] = None

class StatusUpdate(BaseModel):
	status: str

class EndClassRequest(BaseModel):
	teacherId: str

class SuccessOut(BaseModel):
	success: bool = True


# Create teacher and a new class
@router.post("/create-teacher", response_model=TeacherOut)
def create_teacher(presence: PresenceManager = Depends(get_presence)):
	return presence.create_teacher()

# Join a class as a student
@router.post("/create-student", response_model=StudentCreated)
def create_student(payload: StudentCreate, presence: PresenceManager = Depends(get_presence)):
	return presence.create_student(payload.classCode, payload.name)

# Get the roster with live text, in join order
@router.get("/students/{class_code}", response_model=List[StudentOut])
def get_students(class_code: str, store: SessionStore = Depends(get_store)):
	return [entry.to_dict() for entry in store.get_roster(class_code)]

# Set problem statement (teacher only)
@router.post("/set-problem/{class_code}", response_model=SuccessOut)
async def set_problem(
	class_code: str,
	payload: ProblemUpdate,
	store: SessionStore = Depends(get_store),
	manager: ConnectionManager = Depends(get_manager),
):
	store.set_problem_statement(class_code, payload.teacherId, payload.problemStatement)
	await manager.broadcast(class_code, PROBLEM_STATEMENT_UPDATED, {
		"classCode": class_code,
		"problemStatement": payload.problemStatement,
	})
	return {"success": True}

@router.get("/problem/{class_code}", response_model=ProblemOut)
def get_problem(class_code: str, store: SessionStore = Depends(get_store)):
	return {"problemStatement": store.get_problem_statement(class_code)}

# Update a student's status
@router.post("/update-status/{class_code}/{student_id}", response_model=SuccessOut)
async def update_status(
	class_code: str,
	student_id: str,
	payload: StatusUpdate,
	store: SessionStore = Depends(get_store),
	manager: ConnectionManager = Depends(get_manager),
):
	student = store.set_student_status(class_code, student_id, payload.status)
	await manager.broadcast(class_code, STUDENT_STATUS_CHANGED, {
		"studentId": student_id,
		"classCode": class_code,
		"status": student.status.value,
	})
	return {"success": True}

# Stop accepting new students
@router.post("/end-class/{class_code}", response_model=SuccessOut, status_code=status.HTTP_200_OK)
def end_class(class_code: str, payload: EndClassRequest, presence: PresenceManager = Depends(get_presence)):
	presence.end_class(class_code, payload.teacherId)
	return {"success": True}
