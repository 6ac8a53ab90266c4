"""Course controller — maps service results to HTTP responses, catches domain exceptions."""

from __future__ import annotations

from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.courses import service
from app.courses.schemas import (
    CourseResponse,
    CreateCourseRequest,
    ScormLaunchResponse,
    UpdateCourseRequest,
)
from app.exceptions import (
    ContentNotAccessibleError,
    CourseNotFoundError,
    CourseNotReadyError,
    NotCourseOwnerError,
    ScormPackageNotFoundError,
)


def _handle_domain_error(exc: Exception) -> HTTPException:
    if isinstance(exc, (CourseNotFoundError, ScormPackageNotFoundError)):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, NotCourseOwnerError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not the course instructor.")
    if isinstance(exc, ContentNotAccessibleError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Course not purchased.")
    if isinstance(exc, CourseNotReadyError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error.")


async def create_course(
    db: AsyncSession, instructor_id: UUID, body: CreateCourseRequest,
) -> CourseResponse:
    try:
        course = await service.create_course(db, instructor_id, title=body.title)
        return CourseResponse.model_validate(course)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def update_course(
    db: AsyncSession, owner_id: UUID, course_id: UUID, body: UpdateCourseRequest,
) -> CourseResponse:
    try:
        course = await service.update_course(
            db, owner_id, course_id, **body.model_dump(exclude_unset=True),
        )
        return CourseResponse.model_validate(course)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def delete_course(db: AsyncSession, owner_id: UUID, course_id: UUID) -> None:
    try:
        await service.delete_course(db, owner_id, course_id)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def publish_course(db: AsyncSession, owner_id: UUID, course_id: UUID) -> CourseResponse:
    try:
        course = await service.publish_course(db, owner_id, course_id)
        return CourseResponse.model_validate(course)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def unpublish_course(db: AsyncSession, owner_id: UUID, course_id: UUID) -> CourseResponse:
    try:
        course = await service.unpublish_course(db, owner_id, course_id)
        return CourseResponse.model_validate(course)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def get_scorm_launch(db: AsyncSession, user_id: UUID, course_id: UUID) -> ScormLaunchResponse:
    try:
        course, package = await service.get_scorm_launch(db, user_id, course_id)
        return ScormLaunchResponse(
            course_id=course.course_id,
            course_title=course.title,
            scorm_package_id=package.scorm_package_id,
            title=package.title,
            version=package.version,
            launch_url=package.launch_url,
        )
    except Exception as exc:
        raise _handle_domain_error(exc) from exc
