"""Domain-level contracts shared by the service, the repository and the API layer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal, Protocol, Sequence, Union


@dataclass(slots=True)
class RegisterStudentsInput:
    """Teacher plus the ordered students to register under them."""

    teacher_id: str
    student_ids: list[str]


@dataclass(slots=True)
class NotificationInput:
    """Teacher sending a notification and its free-text body."""

    teacher_id: str
    notification: str


@dataclass(slots=True, frozen=True)
class InsertOk:
    """Registration row written."""


@dataclass(slots=True, frozen=True)
class DuplicateKey:
    """The (teacher, student) pair already exists."""


@dataclass(slots=True, frozen=True)
class ForeignKeyViolation:
    """One side of the registration does not exist."""

    which: Literal["teacher", "student"]


InsertOutcome = Union[InsertOk, DuplicateKey, ForeignKeyViolation]


class ClassroomStore(Protocol):
    """Data-access capability consumed by ``ClassroomService``.

    Implementations raise ``StorageError`` for any failure they cannot map onto
    an ``InsertOutcome``.
    """

    def insert_registration(self, teacher_id: str, student_id: str) -> InsertOutcome: ...

    def query_registered_non_suspended(self, teacher_id: str) -> list[str]: ...

    def query_non_suspended_among(self, student_ids: Iterable[str]) -> list[str]: ...

    def query_common_students(self, teacher_ids: Sequence[str], threshold: int) -> list[str]: ...

    def update_suspended(self, student_id: str) -> int: ...
