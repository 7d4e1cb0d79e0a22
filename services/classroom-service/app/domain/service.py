"""Classroom service orchestrating registration, suspension and notification workflows."""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from .contracts import (
    ClassroomStore,
    DuplicateKey,
    ForeignKeyViolation,
    InsertOk,
    NotificationInput,
    RegisterStudentsInput,
)
from .errors import DuplicateRegistration, InputError, StorageError, UnknownStudent, UnknownTeacher
from .mentions import parse_mentions

logger = logging.getLogger(__name__)

REGISTER_FIELDS_REQUIRED = "Both 'teacher' and 'students' fields are required in the request body"
TEACHER_QUERY_REQUIRED = "At least one teacher is required in the query parameter"
SUSPEND_FIELD_REQUIRED = "'student' is required in the request body"
NOTIFICATION_FIELDS_REQUIRED = (
    "Both 'teacher' and 'notification' fields are required in the request body"
)


class ClassroomService:
    """Classroom workflows backed by a ``ClassroomStore``."""

    def __init__(self, repository: ClassroomStore) -> None:
        """Store the data-access collaborator used by every workflow."""
        self._repository = repository

    def register(self, payload: RegisterStudentsInput) -> None:
        """Register each student under the teacher, stopping at the first failure.

        Inserts run one at a time in request order. Rows written before a
        failure stay committed; nothing is rolled back.

        Raises
        ------
        InputError
            When the teacher or the student list is empty.
        DuplicateRegistration, UnknownTeacher, UnknownStudent, StorageError
            For the first student whose insert fails.
        """
        if not payload.teacher_id or not payload.student_ids:
            raise InputError(REGISTER_FIELDS_REQUIRED)

        for student_id in payload.student_ids:
            outcome = self._repository.insert_registration(payload.teacher_id, student_id)
            if isinstance(outcome, InsertOk):
                continue
            if isinstance(outcome, DuplicateKey):
                raise DuplicateRegistration(student_id)
            if isinstance(outcome, ForeignKeyViolation):
                if outcome.which == "teacher":
                    raise UnknownTeacher(payload.teacher_id)
                raise UnknownStudent(student_id)
            raise StorageError(f"unexpected insert outcome: {outcome!r}")

        logger.info(
            "registered %d student(s) under %s", len(payload.student_ids), payload.teacher_id
        )

    def common_students(self, teacher_ids: Sequence[str]) -> list[str]:
        """Return students registered with every listed teacher.

        The threshold is the raw number of identifiers passed, duplicates
        included, so repeating a teacher makes the result empty.
        """
        if not teacher_ids:
            raise InputError(TEACHER_QUERY_REQUIRED)
        students = self._repository.query_common_students(list(teacher_ids), len(teacher_ids))
        return sorted(set(students))

    def suspend(self, student_id: str) -> None:
        """Mark the student as suspended; suspending twice is not an error."""
        if not student_id:
            raise InputError(SUSPEND_FIELD_REQUIRED)
        affected = self._repository.update_suspended(student_id)
        if affected == 0:
            raise UnknownStudent(student_id)
        logger.info("suspended student %s", student_id)

    def resolve_recipients(self, teacher_id: str, mentioned_ids: Iterable[str]) -> set[str]:
        """Union of active students registered with the teacher and active mentioned students."""
        if not teacher_id:
            raise InputError(NOTIFICATION_FIELDS_REQUIRED)
        recipients = set(self._repository.query_registered_non_suspended(teacher_id))
        mentioned = set(mentioned_ids)
        if mentioned:
            recipients.update(self._repository.query_non_suspended_among(mentioned))
        return recipients

    def retrieve_for_notifications(self, payload: NotificationInput) -> list[str]:
        """Resolve the sorted recipient list for a notification sent by a teacher."""
        if not payload.teacher_id or not payload.notification:
            raise InputError(NOTIFICATION_FIELDS_REQUIRED)
        mentions = parse_mentions(payload.notification)
        recipients = self.resolve_recipients(payload.teacher_id, mentions)
        logger.info(
            "resolved %d recipient(s) for %s (%d mention(s))",
            len(recipients),
            payload.teacher_id,
            len(mentions),
        )
        return sorted(recipients)
