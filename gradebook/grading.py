import math
import re
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Any, Iterable, List, Sequence, Union

from .schemas import GradeResult, SubjectMark

PASS_MARK = 35
MAX_MARK = 100
CGPA_DIVISOR = 9.5
# integers above this lose precision as floats
MAX_SAFE_INTEGER = 2 ** 53 - 1

GRADE_BANDS = [
    (80, "A"),
    (60, "B"),
    (50, "C"),
]
LOW_PASS_GRADE = "D"
FAIL_GRADE = "Fail"
# never produced by compute(); still a legal stored grade
FALLBACK_GRADE = "F"

_LEADING_NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def as_number(value: Union[int, float]) -> Union[int, float]:
    """Whole floats become ints so documents store 80, not 80.0."""
    if isinstance(value, float) and value.is_integer() and abs(value) <= MAX_SAFE_INTEGER:
        return int(value)
    return value


def coerce_mark(raw: Any) -> Union[int, float]:
    """Turn a raw field value into a mark; anything unreadable counts as 0."""
    if raw is None or isinstance(raw, bool):
        return 0
    if isinstance(raw, (int, float)):
        value = float(raw)
    else:
        match = _LEADING_NUMBER.match(str(raw).strip())
        if not match:
            return 0
        value = float(match.group())
    if not math.isfinite(value):
        return 0
    return as_number(value)


def build_marks(raw_marks: Iterable[Any]) -> List[SubjectMark]:
    return [
        SubjectMark(subject=f"Subject {i + 1}", mark=coerce_mark(raw))
        for i, raw in enumerate(raw_marks)
    ]


def round_2dp_half_up(x: float) -> str:
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "Infinity" if x > 0 else "-Infinity"
    # Decimal(x) is the exact binary value, so ties round like toFixed(2);
    # 400 digits hold any finite double to two places
    with localcontext() as ctx:
        ctx.prec = 400
        return str(Decimal(x).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def letter_grade(percentage: float, has_fail: bool) -> str:
    if has_fail:
        return FAIL_GRADE
    for threshold, letter in GRADE_BANDS:
        if percentage >= threshold:
            return letter
    return LOW_PASS_GRADE


def mark_status(mark: float) -> str:
    return "Pass" if mark >= PASS_MARK else "Fail"


def compute(marks: Sequence[SubjectMark]) -> GradeResult:
    """
    Derive total, percentage, cgpa and grade from an ordered list of marks.

    With no marks the record is ungraded: total 0, cgpa "0.00", and neither
    a percentage nor a grade.
    """
    total = as_number(sum(m.mark for m in marks))
    if not marks:
        return GradeResult(total=total, cgpa=round_2dp_half_up(0.0))

    max_total = len(marks) * MAX_MARK
    percentage = total / max_total * 100
    has_fail = any(m.mark < PASS_MARK for m in marks)

    return GradeResult(
        total=total,
        percentage=percentage,
        cgpa=round_2dp_half_up(percentage / CGPA_DIVISOR),
        grade=letter_grade(percentage, has_fail),
    )


def cgpa_value(cgpa: str) -> float:
    """Numeric value of a stored cgpa string, for ordering."""
    try:
        value = float(cgpa)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(value) else value
