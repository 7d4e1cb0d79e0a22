"""Domain failures surfaced by classroom workflows."""

from __future__ import annotations


class ClassroomError(Exception):
    """Base class for every failure the API reports to callers."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InputError(ClassroomError):
    """A required request field was missing or empty."""


class DuplicateRegistration(ClassroomError):
    """The (teacher, student) pair is already registered."""

    def __init__(self, student_id: str) -> None:
        super().__init__(f"{student_id} is already registered with this teacher")
        self.student_id = student_id


class UnknownTeacher(ClassroomError):
    """The referenced teacher does not exist."""

    def __init__(self, teacher_id: str) -> None:
        super().__init__(f"Teacher {teacher_id} does not exist in the database")
        self.teacher_id = teacher_id


class UnknownStudent(ClassroomError):
    """The referenced student does not exist."""

    def __init__(self, student_id: str) -> None:
        super().__init__(f"Student {student_id} does not exist in the database")
        self.student_id = student_id


class StorageError(ClassroomError):
    """Unclassified data-access failure; the driver message is kept verbatim."""
