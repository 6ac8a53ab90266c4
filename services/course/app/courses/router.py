"""Course router — HTTP layer only."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.courses import controller
from app.courses.schemas import (
    CourseResponse,
    CreateCourseRequest,
    ScormLaunchResponse,
    UpdateCourseRequest,
)
from app.database import get_db
from shared.auth.dependencies import get_current_user_required, require_role
from shared.constants import Role
from shared.models.user import CurrentUser

router = APIRouter(prefix="/courses", tags=["Courses"])


@router.post(
    "",
    response_model=CourseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a draft course",
    description="Teacher role only. The caller becomes the course instructor.",
)
async def create_course(
    body: CreateCourseRequest,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_role(Role.TEACHER)),
) -> CourseResponse:
    return await controller.create_course(db, user.id, body)


@router.patch(
    "/{course_id}",
    response_model=CourseResponse,
    summary="Update course (instructor only)",
)
async def update_course(
    course_id: UUID,
    body: UpdateCourseRequest,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user_required),
) -> CourseResponse:
    return await controller.update_course(db, user.id, course_id, body)


@router.delete(
    "/{course_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete course (instructor only)",
    description="Chapters, the SCORM package, purchases and progress go with it.",
)
async def delete_course(
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user_required),
) -> None:
    await controller.delete_course(db, user.id, course_id)


@router.patch(
    "/{course_id}/publish",
    response_model=CourseResponse,
    summary="Publish a course",
    description="Instructor only. SCORM courses need a title and category; "
    "chapter courses also need a description, cover image and a published chapter.",
)
async def publish_course(
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user_required),
) -> CourseResponse:
    return await controller.publish_course(db, user.id, course_id)


@router.patch(
    "/{course_id}/unpublish",
    response_model=CourseResponse,
    summary="Unpublish a course",
)
async def unpublish_course(
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user_required),
) -> CourseResponse:
    return await controller.unpublish_course(db, user.id, course_id)


@router.get(
    "/{course_id}/scorm",
    response_model=ScormLaunchResponse,
    summary="SCORM launch descriptor",
    description="Purchasers and the course instructor only.",
)
async def get_scorm_launch(
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user_required),
) -> ScormLaunchResponse:
    return await controller.get_scorm_launch(db, user.id, course_id)
