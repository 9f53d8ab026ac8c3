import logging
import re
from typing import List, Optional, Tuple

from .database import RecordStore
from .errors import ConflictError, ErrorReason, ValidationError
from .schemas import StudentRecord

logger = logging.getLogger(__name__)

NAME_PATTERN = re.compile(r"[a-zA-Z]+(?: [a-zA-Z]+)*")


def is_valid_name(name: str) -> bool:
    """Letters only, words separated by single spaces."""
    return NAME_PATTERN.fullmatch(name or "") is not None


def check_name(name: str) -> None:
    if not is_valid_name(name):
        raise ValidationError(
            ErrorReason.INVALID_NAME,
            "Invalid Name: Please use only letters and single spaces between words "
            "(no numbers or special characters).",
        )


class StudentDirectory:
    """Student collection keyed by id. Every mutation rewrites the whole slot."""

    def __init__(self, store: RecordStore):
        self.store = store
        self._students: List[StudentRecord] = store.load_students()

    @property
    def records(self) -> Tuple[StudentRecord, ...]:
        return tuple(self._students)

    def find_by_id(self, student_id: str) -> Optional[StudentRecord]:
        for s in self._students:
            if s.id == student_id:
                return s
        return None

    def _index_of(self, student_id: str) -> int:
        for i, s in enumerate(self._students):
            if s.id == student_id:
                return i
        return -1

    def upsert(self, candidate: StudentRecord) -> StudentRecord:
        check_name(candidate.name)
        idx = self._index_of(candidate.id)
        if idx >= 0:
            # re-grading keeps the credential the student signed up with
            candidate = candidate.model_copy(update={"password": self._students[idx].password})
            self._students[idx] = candidate
            logger.info("Updated student %s", candidate.id)
        else:
            self._students.append(candidate)
            logger.info("Added student %s", candidate.id)
        self.persist()
        return candidate

    def remove(self, student_id: str) -> None:
        before = len(self._students)
        self._students = [s for s in self._students if s.id != student_id]
        if len(self._students) < before:
            logger.info("Removed student %s", student_id)
        self.persist()

    def signup(self, student_id: str, name: str, password: str) -> StudentRecord:
        check_name(name)
        if self.find_by_id(student_id) is not None:
            raise ConflictError(ErrorReason.DUPLICATE_ID, "Student ID already exists")
        record = StudentRecord(id=student_id, name=name, password=password, branch="", marks=[])
        self._students.append(record)
        logger.info("Registered student %s", student_id)
        self.persist()
        return record

    def persist(self) -> None:
        self.store.save_students(self._students)
