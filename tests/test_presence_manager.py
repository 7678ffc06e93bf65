import pytest

from services.errors import ValidationError


def test_create_teacher_creates_session(presence, store):
    out = presence.create_teacher()
    assert out["teacherId"].startswith("teacher_")
    assert store.get_session(out["classCode"]).teacher_id == out["teacherId"]


def test_create_student(presence, store):
    code = presence.create_teacher()["classCode"]
    out = presence.create_student(code, "Sam")
    assert out["classCode"] == code
    assert store.get_student(out["studentId"]).name == "Sam"


def test_create_student_invalid_code_leaves_no_state(presence, store):
    with pytest.raises(ValidationError):
        presence.create_student("ZZZZZZ", "Sam")
    assert store.session_count() == 0


def test_teacher_snapshot(presence):
    teacher = presence.create_teacher()
    code = teacher["classCode"]
    student = presence.create_student(code, "Sam")
    presence.update_text(student["studentId"], code, "x = 1")
    presence.store.set_problem_statement(code, teacher["teacherId"], "Sum two numbers")

    snapshot = presence.teacher_snapshot(code)

    assert snapshot["classCode"] == code
    assert snapshot["problemStatement"] == "Sum two numbers"
    assert snapshot["students"][0]["name"] == "Sam"
    assert snapshot["students"][0]["currentText"] == "x = 1"


def test_snapshots_for_unknown_ids_are_none(presence):
    code = presence.create_teacher()["classCode"]
    other = presence.create_teacher()["classCode"]
    student = presence.create_student(other)
    assert presence.teacher_snapshot("NOPE00") is None
    assert presence.student_snapshot("student_nope", code) is None
    assert presence.student_snapshot(student["studentId"], code) is None


def test_student_snapshot(presence):
    code = presence.create_teacher()["classCode"]
    student_id = presence.create_student(code)["studentId"]
    presence.update_text(student_id, code, "draft")
    assert presence.student_snapshot(student_id, code) == {
        "studentId": student_id,
        "text": "draft",
        "problemStatement": None,
    }


def test_update_text_requires_matching_class(presence, store):
    code = presence.create_teacher()["classCode"]
    other = presence.create_teacher()["classCode"]
    student_id = presence.create_student(code)["studentId"]
    assert presence.update_text(student_id, other, "leak") is None
    assert store.get_text(student_id) == ""


def test_update_status_payload(presence):
    code = presence.create_teacher()["classCode"]
    student_id = presence.create_student(code)["studentId"]
    assert presence.update_status(student_id, code, "done") == {
        "studentId": student_id,
        "classCode": code,
        "status": "done",
    }
    assert presence.update_status(student_id, code, "bogus") is None


def test_update_problem_unknown_class(presence):
    assert presence.update_problem("NOPE00", "text") is None
