from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.api import routes
from app.api.error_handlers import register_error_handlers
from app.domain.contracts import DuplicateKey, ForeignKeyViolation, InsertOk, InsertOutcome
from app.domain.service import ClassroomService


@dataclass(slots=True)
class Teacher:
    teacher_id: str


@dataclass(slots=True)
class Student:
    student_id: str
    is_suspended: bool = False


@dataclass(slots=True, frozen=True)
class Registration:
    teacher_id: str
    student_id: str


class FakeRepository:
    """In-memory repository mimicking Postgres-backed behaviors."""

    def __init__(self) -> None:
        self.teachers: dict[str, Teacher] = {}
        self.students: dict[str, Student] = {}
        self.registrations: list[Registration] = []
        self.insert_attempts: list[tuple[str, str]] = []
        self.mention_queries: list[set[str]] = []

    def add_teacher(self, teacher_id: str) -> None:
        self.teachers[teacher_id] = Teacher(teacher_id=teacher_id)

    def add_student(self, student_id: str, *, is_suspended: bool = False) -> None:
        self.students[student_id] = Student(student_id=student_id, is_suspended=is_suspended)

    def insert_registration(self, teacher_id: str, student_id: str) -> InsertOutcome:
        self.insert_attempts.append((teacher_id, student_id))
        registration = Registration(teacher_id=teacher_id, student_id=student_id)
        # primary key is checked before the foreign keys, as Postgres does
        if registration in self.registrations:
            return DuplicateKey()
        if teacher_id not in self.teachers:
            return ForeignKeyViolation(which="teacher")
        if student_id not in self.students:
            return ForeignKeyViolation(which="student")
        self.registrations.append(registration)
        return InsertOk()

    def query_registered_non_suspended(self, teacher_id: str) -> list[str]:
        return [
            r.student_id
            for r in self.registrations
            if r.teacher_id == teacher_id and not self.students[r.student_id].is_suspended
        ]

    def query_non_suspended_among(self, student_ids: Iterable[str]) -> list[str]:
        wanted = set(student_ids)
        self.mention_queries.append(wanted)
        return [
            student.student_id
            for student in self.students.values()
            if student.student_id in wanted and not student.is_suspended
        ]

    def query_common_students(self, teacher_ids: Sequence[str], threshold: int) -> list[str]:
        teachers_by_student: dict[str, set[str]] = {}
        for r in self.registrations:
            if r.teacher_id in teacher_ids:
                teachers_by_student.setdefault(r.student_id, set()).add(r.teacher_id)
        return [
            student_id
            for student_id, teachers in teachers_by_student.items()
            if len(teachers) == threshold
        ]

    def update_suspended(self, student_id: str) -> int:
        student = self.students.get(student_id)
        if student is None:
            return 0
        student.is_suspended = True
        return 1


@pytest.fixture
def repository() -> FakeRepository:
    return FakeRepository()


@pytest.fixture
def service(repository: FakeRepository) -> ClassroomService:
    return ClassroomService(repository)


@pytest.fixture
def api_client(service: ClassroomService):
    """Provide a FastAPI test client with isolated state."""
    app = FastAPI()
    app.include_router(routes.router)
    register_error_handlers(app)
    app.state.classroom_service = service

    with TestClient(app) as client:
        yield client
