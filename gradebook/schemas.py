"""
Data models for the gradebook

StudentRecord and TeacherCredential are the persisted documents (one JSON
array per collection). The credential field is stored under the key "pass";
in Python it is reached as `password`.
"""
from __future__ import annotations
from typing import Any, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator

Number = Union[int, float]
Role = Literal["teacher", "student"]
Grade = Literal["A", "B", "C", "D", "F", "Fail"]
RosterMode = Literal["all", "rank-high", "failed"]


class Document(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


# Records
class SubjectMark(BaseModel):
    subject: str
    mark: Number


class StudentRecord(Document):
    id: str
    name: str
    branch: str = ""
    year: str = ""
    section: str = ""
    password: str = Field("", alias="pass")
    marks: List[SubjectMark] = []
    total: Optional[Number] = None
    cgpa: str = "0.00"
    grade: Optional[Grade] = None

    @field_validator("cgpa", mode="before")
    @classmethod
    def fixed_two_decimals(cls, value: Any) -> Any:
        # older documents stored a bare 0 for freshly signed-up students
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return f"{float(value):.2f}"
        return value

    def public(self) -> dict:
        return self.model_dump(by_alias=True, exclude={"password"}, exclude_none=True)


class TeacherCredential(Document):
    user: str
    password: str = Field(..., alias="pass")


class Session(BaseModel):
    role: Role
    user: Optional[str] = None
    student: Optional[StudentRecord] = None


# Derived values
class GradeResult(BaseModel):
    total: Number
    percentage: Optional[float] = None
    cgpa: str
    grade: Optional[Grade] = None


class RosterRow(BaseModel):
    rank: int
    record: StudentRecord
    removable: bool = False


class MarkLine(BaseModel):
    subject: str
    mark: Number
    status: Literal["Pass", "Fail"]


class StudentReport(BaseModel):
    id: str
    name: str
    lines: List[MarkLine] = []
    total: Optional[Number] = None
    cgpa: Optional[str] = None
    grade: Optional[Grade] = None


# Requests from the view layer
class LoginIn(Document):
    role: Role
    user: str
    password: str = Field(..., alias="pass")


class TeacherSignup(Document):
    user: str
    password: str = Field(..., alias="pass")


class StudentSignup(Document):
    id: str
    name: str
    password: str = Field(..., alias="pass")


class StudentIn(Document):
    id: str
    name: str
    branch: str = ""
    year: str = ""
    section: str = ""
    marks: List[Any] = []
