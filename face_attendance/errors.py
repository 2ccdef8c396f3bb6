"""Exceptions raised by the check-in pipeline and its storage collaborators."""


class AttendanceError(Exception):
    """Base class for all check-in errors."""


class InvalidInputError(AttendanceError):
    """Embedding (or student name) is missing, non-numeric or the wrong length."""


class RegistryUnavailable(AttendanceError):
    """The student registry could not be read."""


class PersistenceError(AttendanceError):
    """The attendance write failed after a successful match."""


class CooldownActive(AttendanceError):
    """The student already checked in within the cooldown window."""

    def __init__(self, student_id, message=None):
        self.student_id = student_id
        super().__init__(message or f"Check-in for {student_id} is inside the cooldown window")


class StudentNotFound(AttendanceError):
    """No student with the given id exists."""
