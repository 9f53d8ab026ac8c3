import logging
from typing import List, Optional

from .database import RecordStore
from .directory import StudentDirectory
from .errors import AuthError, ErrorReason
from .schemas import Role, Session, TeacherCredential

ROLES = ("teacher", "student")

logger = logging.getLogger(__name__)


class TeacherRegistry:
    def __init__(self, store: RecordStore):
        self.store = store
        self._teachers: List[TeacherCredential] = store.load_teachers()

    @property
    def teachers(self):
        return tuple(self._teachers)

    def find(self, user: str, password: str) -> Optional[TeacherCredential]:
        for t in self._teachers:
            if t.user == user and t.password == password:
                return t
        return None

    def signup(self, user: str, password: str) -> TeacherCredential:
        if any(t.user == user for t in self._teachers):
            logger.warning("Teacher name %s is already registered, adding another entry", user)
        teacher = TeacherCredential(user=user, password=password)
        self._teachers.append(teacher)
        self.store.save_teachers(self._teachers)
        logger.info("Registered teacher %s", user)
        return teacher


class SessionContext:
    """Single in-memory login slot: anonymous until a login succeeds."""

    def __init__(self):
        self.current: Optional[Session] = None

    @property
    def is_authenticated(self) -> bool:
        return self.current is not None

    @property
    def role(self) -> Optional[str]:
        return self.current.role if self.current else None

    def login(self, role: Role, user: str, password: str,
              teachers: TeacherRegistry, directory: StudentDirectory) -> Session:
        if role not in ROLES:
            raise ValueError(f"Unknown role: {role}")
        if role == "teacher":
            found = teachers.find(user, password)
            if found is None:
                logger.warning("Failed teacher login for %s", user)
                raise AuthError(ErrorReason.INVALID_CREDENTIALS, "Invalid Teacher Credentials")
            session = Session(role="teacher", user=found.user)
        else:
            record = next(
                (s for s in directory.records if s.id == user and s.password == password), None
            )
            if record is None:
                logger.warning("Failed student login for %s", user)
                raise AuthError(ErrorReason.STUDENT_NOT_FOUND, "Student not found or wrong password")
            session = Session(role="student", user=record.id, student=record.model_copy(deep=True))

        self.current = session
        logger.info("%s %s logged in", role.capitalize(), session.user)
        return session

    def logout(self) -> None:
        if self.current is not None:
            logger.info("%s %s logged out", self.current.role.capitalize(), self.current.user)
        self.current = None
