from typing import Iterable, List, Optional

from .grading import FAIL_GRADE, cgpa_value
from .schemas import RosterRow, StudentRecord

MODES = ("all", "rank-high", "failed")


def project(records: Iterable[StudentRecord], mode: str = "all", role: Optional[str] = None) -> List[RosterRow]:
    """
    Read-only view over the student collection.

    "all" keeps insertion order, "rank-high" orders by numeric cgpa (highest
    first, ties keep their order) and "failed" keeps only records graded
    Fail. Ranks are 1-based positions in the result. Only a teacher gets the
    remove affordance on each row.
    """
    if mode not in MODES:
        raise ValueError(f"Unknown roster mode: {mode}")

    rows = list(records)
    if mode == "rank-high":
        rows.sort(key=lambda s: cgpa_value(s.cgpa), reverse=True)
    elif mode == "failed":
        rows = [s for s in rows if s.grade == FAIL_GRADE]

    removable = role == "teacher"
    return [RosterRow(rank=i + 1, record=s, removable=removable) for i, s in enumerate(rows)]
