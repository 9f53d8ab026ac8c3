"""
Local key-value storage for the gradebook

Two independent slots, "students" and "teachers", each hold one JSON array.
A slot is read whole and overwritten whole on every write; there is no
transaction and no partial-write recovery.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .schemas import StudentRecord, TeacherCredential

logger = logging.getLogger(__name__)

STUDENTS = "students"
TEACHERS = "teachers"
DEFAULT_TEACHERS = [{"user": "admin", "pass": "admin"}]


class MemoryBackend:
    """Slots kept in a dict for the life of the process."""

    def __init__(self, slots: Optional[Dict[str, str]] = None):
        self.slots: Dict[str, str] = dict(slots or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.slots.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.slots[key] = value


class JsonFileBackend:
    """One <key>.json file per slot inside a data directory."""

    def __init__(self, directory):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self._path(key).write_text(value, encoding="utf-8")


class RecordStore:
    def __init__(self, backend):
        self.backend = backend

    def get_documents(self, slot: str) -> Optional[List[Dict[str, Any]]]:
        raw = self.backend.get_item(slot)
        if not raw:
            return None
        return json.loads(raw)

    def save_documents(self, slot: str, documents: List[Dict[str, Any]]) -> None:
        try:
            self.backend.set_item(slot, json.dumps(documents, indent=2))
        except Exception:
            logger.exception("Failed to write slot %s", slot)
            raise
        logger.debug("Saved %d documents to %s", len(documents), slot)

    def load_students(self) -> List[StudentRecord]:
        docs = self.get_documents(STUDENTS) or []
        return [StudentRecord.model_validate(d) for d in docs]

    def save_students(self, records: List[StudentRecord]) -> None:
        self.save_documents(STUDENTS, [r.to_document() for r in records])

    def load_teachers(self) -> List[TeacherCredential]:
        docs = self.get_documents(TEACHERS)
        if docs is None:
            docs = DEFAULT_TEACHERS
        return [TeacherCredential.model_validate(d) for d in docs]

    def save_teachers(self, teachers: List[TeacherCredential]) -> None:
        self.save_documents(TEACHERS, [t.to_document() for t in teachers])


def open_store(storage: str = "file", data_dir="data") -> RecordStore:
    if storage == "memory":
        return RecordStore(MemoryBackend())
    return RecordStore(JsonFileBackend(data_dir))
