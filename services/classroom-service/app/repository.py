"""Database repository for teacher/student registration data."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterable, Iterator, Sequence

import psycopg
from psycopg import errors
from psycopg.rows import tuple_row
from psycopg_pool import ConnectionPool

from .domain.contracts import DuplicateKey, ForeignKeyViolation, InsertOk, InsertOutcome
from .domain.errors import StorageError

logger = logging.getLogger(__name__)

TEACHER_FK_CONSTRAINT = "registrations_teacher_email_fkey"
STUDENT_FK_CONSTRAINT = "registrations_student_email_fkey"


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    """Re-raise driver failures as ``StorageError`` carrying the driver message."""
    try:
        yield
    except psycopg.Error as exc:
        logger.error("%s failed: %s", operation, exc)
        raise StorageError(str(exc)) from exc


class ClassroomRepository:
    """Postgres-backed registration persistence."""

    def __init__(self, pool: ConnectionPool) -> None:
        """Store the connection pool used for all database interactions."""
        self._pool = pool

    def insert_registration(self, teacher_id: str, student_id: str) -> InsertOutcome:
        """Insert a registration row and classify constraint violations."""
        try:
            with self._pool.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        """
                        INSERT INTO registrations (teacher_email, student_email)
                        VALUES (%s, %s)
                        """,
                        (teacher_id, student_id),
                    )
                conn.commit()
        except errors.UniqueViolation:
            return DuplicateKey()
        except errors.ForeignKeyViolation as exc:
            constraint = exc.diag.constraint_name
            if constraint == TEACHER_FK_CONSTRAINT:
                return ForeignKeyViolation(which="teacher")
            if constraint == STUDENT_FK_CONSTRAINT:
                return ForeignKeyViolation(which="student")
            logger.error("insert_registration hit unknown constraint %s: %s", constraint, exc)
            raise StorageError(str(exc)) from exc
        except psycopg.Error as exc:
            logger.error("insert_registration failed: %s", exc)
            raise StorageError(str(exc)) from exc
        return InsertOk()

    def query_registered_non_suspended(self, teacher_id: str) -> list[str]:
        """Return active students registered with the teacher."""
        with _storage_errors("query_registered_non_suspended"):
            with self._pool.connection() as conn:
                with conn.cursor(row_factory=tuple_row) as cur:
                    cur.execute(
                        """
                        SELECT DISTINCT r.student_email
                        FROM registrations r
                        JOIN students s ON s.student_email = r.student_email
                        WHERE r.teacher_email = %s AND s.is_suspended = false
                        """,
                        (teacher_id,),
                    )
                    rows = cur.fetchall()
        return [row[0] for row in rows]

    def query_non_suspended_among(self, student_ids: Iterable[str]) -> list[str]:
        """Return the active students whose identifier is in ``student_ids``."""
        ids = list(student_ids)
        if not ids:
            return []
        with _storage_errors("query_non_suspended_among"):
            with self._pool.connection() as conn:
                with conn.cursor(row_factory=tuple_row) as cur:
                    cur.execute(
                        """
                        SELECT DISTINCT student_email
                        FROM students
                        WHERE student_email = ANY(%s) AND is_suspended = false
                        """,
                        (ids,),
                    )
                    rows = cur.fetchall()
        return [row[0] for row in rows]

    def query_common_students(self, teacher_ids: Sequence[str], threshold: int) -> list[str]:
        """Return students with exactly ``threshold`` distinct registering teachers among ``teacher_ids``."""
        with _storage_errors("query_common_students"):
            with self._pool.connection() as conn:
                with conn.cursor(row_factory=tuple_row) as cur:
                    cur.execute(
                        """
                        SELECT student_email
                        FROM registrations
                        WHERE teacher_email = ANY(%s)
                        GROUP BY student_email
                        HAVING COUNT(DISTINCT teacher_email) = %s
                        """,
                        (list(teacher_ids), threshold),
                    )
                    rows = cur.fetchall()
        return [row[0] for row in rows]

    def update_suspended(self, student_id: str) -> int:
        """Flag the student as suspended and return the number of rows touched."""
        with _storage_errors("update_suspended"):
            with self._pool.connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        "UPDATE students SET is_suspended = true WHERE student_email = %s",
                        (student_id,),
                    )
                    affected = cur.rowcount
                conn.commit()
        return affected
