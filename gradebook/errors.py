"""
Errors raised by the gradebook core.

Every error is raised before any collection is touched, so callers can
recover by simply reporting it. Storage faults are not wrapped here; they
propagate from the backend unchanged.
"""
from enum import Enum


class ErrorReason(str, Enum):
    INVALID_NAME = "InvalidName"
    DUPLICATE_ID = "DuplicateId"
    INVALID_CREDENTIALS = "InvalidCredentials"
    STUDENT_NOT_FOUND = "StudentNotFound"


class GradebookError(Exception):
    def __init__(self, reason: ErrorReason, message: str):
        super().__init__(message)
        self.reason = reason
        self.message = message


class ValidationError(GradebookError):
    pass


class ConflictError(GradebookError):
    pass


class AuthError(GradebookError):
    pass
