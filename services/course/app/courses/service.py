"""Course service — published-course aggregate, publishing, SCORM launch.

No FastAPI imports; raises domain exceptions from app.exceptions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.exceptions import (
    ContentNotAccessibleError,
    CourseNotFoundError,
    CourseNotReadyError,
    NotCourseOwnerError,
    ScormPackageNotFoundError,
)
from app.models.category import Category
from app.models.chapter import Chapter
from app.models.course import Course
from app.models.scorm_package import ScormPackage
from app.purchases.service import find_purchase

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CourseAggregate:
    """A published course as a learner sees it."""

    course: Course
    category: Category | None
    # Published only, ascending by position
    chapters: tuple[Chapter, ...]
    scorm_package: ScormPackage | None

    @property
    def course_id(self) -> UUID:
        return self.course.course_id


# ---------------------------------------------------------------------------
# Learner-facing reads
# ---------------------------------------------------------------------------


def published_course_stmt(course_id: UUID):
    return (
        select(Course)
        .where(Course.course_id == course_id, Course.is_published.is_(True))
        .options(selectinload(Course.category), selectinload(Course.scorm_package))
    )


def published_chapters_stmt(course_id: UUID):
    return (
        select(Chapter)
        .where(Chapter.course_id == course_id, Chapter.is_published.is_(True))
        .order_by(Chapter.position.asc())
    )


async def list_published_chapters(db: AsyncSession, course_id: UUID) -> list[Chapter]:
    result = await db.execute(published_chapters_stmt(course_id))
    return list(result.scalars().all())


async def get_published_course(db: AsyncSession, course_id: UUID) -> CourseAggregate | None:
    """Unpublished and missing courses both come back as ``None``."""
    result = await db.execute(published_course_stmt(course_id))
    course = result.scalar_one_or_none()
    if course is None or not course.is_published:
        return None
    chapters = await list_published_chapters(db, course_id)
    return CourseAggregate(
        course=course,
        category=course.category,
        chapters=tuple(chapters),
        scorm_package=course.scorm_package,
    )


async def get_scorm_launch(
    db: AsyncSession, user_id: UUID, course_id: UUID,
) -> tuple[Course, ScormPackage]:
    """SCORM content boundary: purchasers and the course owner only."""
    aggregate = await get_published_course(db, course_id)
    if aggregate is None:
        raise CourseNotFoundError(str(course_id))
    if aggregate.scorm_package is None:
        raise ScormPackageNotFoundError(str(course_id))
    if aggregate.course.instructor_id != user_id:
        if await find_purchase(db, user_id, course_id) is None:
            raise ContentNotAccessibleError()
    return aggregate.course, aggregate.scorm_package


# ---------------------------------------------------------------------------
# Instructor: authoring
# ---------------------------------------------------------------------------


async def create_course(db: AsyncSession, instructor_id: UUID, *, title: str) -> Course:
    """New courses start as unpublished drafts with only a title."""
    course = Course(instructor_id=instructor_id, title=title, is_published=False)
    db.add(course)
    await db.flush()
    await db.refresh(course)
    logger.info("Course %s created by %s", course.course_id, instructor_id)
    return course


async def update_course(
    db: AsyncSession,
    owner_id: UUID,
    course_id: UUID,
    **fields: object,
) -> Course:
    course = await get_owned_course(db, owner_id, course_id)
    for key, value in fields.items():
        if value is not None:
            setattr(course, key, value)
    await db.flush()
    await db.refresh(course)
    return course


async def delete_course(db: AsyncSession, owner_id: UUID, course_id: UUID) -> None:
    course = await get_owned_course(db, owner_id, course_id)
    await db.delete(course)
    await db.flush()
    logger.info("Course %s deleted by %s", course_id, owner_id)


# ---------------------------------------------------------------------------
# Instructor: publish / unpublish
# ---------------------------------------------------------------------------


async def get_owned_course(db: AsyncSession, owner_id: UUID, course_id: UUID) -> Course:
    stmt = (
        select(Course)
        .where(Course.course_id == course_id)
        .options(selectinload(Course.chapters), selectinload(Course.scorm_package))
    )
    result = await db.execute(stmt)
    course = result.scalar_one_or_none()
    if course is None:
        raise CourseNotFoundError(str(course_id))
    if course.instructor_id != owner_id:
        raise NotCourseOwnerError()
    return course


def missing_publish_fields(course: Course) -> list[str]:
    """Fields a course still needs before it can be published.

    SCORM courses take their content from the package, so only the title
    and category are required. Chapter courses also need a description,
    a cover image and at least one published chapter.
    """
    missing: list[str] = []
    if not course.title:
        missing.append("title")
    if course.category_id is None:
        missing.append("category")
    if course.scorm_package is not None:
        return missing
    if not course.description:
        missing.append("description")
    if not course.image_url:
        missing.append("image_url")
    if not any(chapter.is_published for chapter in course.chapters):
        missing.append("published_chapter")
    return missing


async def publish_course(db: AsyncSession, owner_id: UUID, course_id: UUID) -> Course:
    course = await get_owned_course(db, owner_id, course_id)
    missing = missing_publish_fields(course)
    if missing:
        raise CourseNotReadyError(missing)
    course.is_published = True
    await db.flush()
    return course


async def unpublish_course(db: AsyncSession, owner_id: UUID, course_id: UUID) -> Course:
    course = await get_owned_course(db, owner_id, course_id)
    course.is_published = False
    await db.flush()
    return course
