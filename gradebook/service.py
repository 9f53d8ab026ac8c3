"""
Application context for the gradebook.

One Gradebook object owns the record store, both collections and the login
slot. The view layer calls these methods with plain values and renders what
comes back; errors from gradebook.errors are raised in place of alerts.
"""
from typing import Any, Dict, List, Optional, Sequence

from .database import RecordStore
from .directory import StudentDirectory
from .grading import build_marks, compute, mark_status
from .roster import project
from .schemas import (
    MarkLine,
    RosterRow,
    Role,
    Session,
    StudentRecord,
    StudentReport,
    StudentSignup,
    TeacherSignup,
)
from .session import ROLES, SessionContext, TeacherRegistry


class Gradebook:
    def __init__(self, store: RecordStore):
        self.store = store
        self.directory = StudentDirectory(store)
        self.teachers = TeacherRegistry(store)
        self.session = SessionContext()

    @property
    def current(self) -> Optional[Session]:
        return self.session.current

    # ----------------------------- Auth -----------------------------
    def login(self, role: Role, user: str, password: str) -> Session:
        return self.session.login(role, user, password, self.teachers, self.directory)

    def signup(self, role: Role, fields: Dict[str, Any]) -> None:
        if role not in ROLES:
            raise ValueError(f"Unknown role: {role}")
        if role == "teacher":
            payload = TeacherSignup.model_validate(fields)
            self.teachers.signup(payload.user, payload.password)
        else:
            payload = StudentSignup.model_validate(fields)
            self.directory.signup(payload.id, payload.name, payload.password)

    def logout(self) -> None:
        self.session.logout()

    # ----------------------------- Records -----------------------------
    def add_or_update_student(self, id: str, name: str, branch: str, year: str,
                              section: str, raw_marks: Sequence[Any]) -> StudentRecord:
        marks = build_marks(raw_marks)
        result = compute(marks)
        candidate = StudentRecord(
            id=id,
            name=name,
            branch=branch,
            year=year,
            section=section,
            marks=marks,
            total=result.total,
            cgpa=result.cgpa,
            grade=result.grade,
            # students added before signing up log in with their id
            password=id,
        )
        return self.directory.upsert(candidate)

    def delete_student(self, id: str) -> None:
        self.directory.remove(id)

    def project(self, mode: str = "all") -> List[RosterRow]:
        return project(self.directory.records, mode, role=self.session.role)

    # ----------------------------- Student dashboard -----------------------------
    def student_report(self) -> StudentReport:
        """Marks of the logged-in student as captured at login."""
        current = self.session.current
        if current is None or current.student is None:
            raise RuntimeError("No student is logged in")
        s = current.student
        if not s.marks:
            return StudentReport(id=s.id, name=s.name)
        lines = [MarkLine(subject=m.subject, mark=m.mark, status=mark_status(m.mark)) for m in s.marks]
        return StudentReport(id=s.id, name=s.name, lines=lines, total=s.total, cgpa=s.cgpa, grade=s.grade)
