"""HTTP route definitions for the classroom service."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, Response, status
from pydantic import BaseModel

from ..domain.contracts import NotificationInput, RegisterStudentsInput
from ..domain.service import ClassroomService

router = APIRouter(prefix="/api")


class RegistrationRequest(BaseModel):
    """Teacher registering one or more students; missing or null fields decode as empty."""

    teacher: str | None = None
    students: list[str] | None = None


class SuspendRequest(BaseModel):
    """Student to suspend."""

    student: str | None = None


class NotificationRequest(BaseModel):
    """Notification sent by a teacher."""

    teacher: str | None = None
    notification: str | None = None


class CommonStudentsResponse(BaseModel):
    """Students registered with every requested teacher."""

    students: list[str]


class NotificationResponse(BaseModel):
    """Students eligible to receive a notification."""

    recipients: list[str]


def get_service(request: Request) -> ClassroomService:
    """Resolve the `ClassroomService` stored on the FastAPI application state."""
    service: ClassroomService = request.app.state.classroom_service
    return service


@router.post("/register", status_code=status.HTTP_204_NO_CONTENT)
def register(
    payload: RegistrationRequest,
    service: ClassroomService = Depends(get_service),
) -> Response:
    """Register students with a teacher, stopping at the first failing student."""
    service.register(
        RegisterStudentsInput(teacher_id=payload.teacher or "", student_ids=payload.students or [])
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/commonstudents", response_model=CommonStudentsResponse)
def common_students(
    teacher: list[str] | None = Query(default=None),
    service: ClassroomService = Depends(get_service),
) -> CommonStudentsResponse:
    """List students common to all teachers given as repeated ``teacher`` parameters."""
    return CommonStudentsResponse(students=service.common_students(teacher or []))


@router.post("/suspend", status_code=status.HTTP_204_NO_CONTENT)
def suspend(
    payload: SuspendRequest,
    service: ClassroomService = Depends(get_service),
) -> Response:
    """Suspend a student."""
    service.suspend(payload.student or "")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/retrievefornotifications", response_model=NotificationResponse)
def retrieve_for_notifications(
    payload: NotificationRequest,
    service: ClassroomService = Depends(get_service),
) -> NotificationResponse:
    """Return active registered and mentioned students who should receive the notification."""
    recipients = service.retrieve_for_notifications(
        NotificationInput(
            teacher_id=payload.teacher or "", notification=payload.notification or ""
        )
    )
    return NotificationResponse(recipients=recipients)
