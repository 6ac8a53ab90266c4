"""Where a learner lands when opening a course."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from app.courses.service import CourseAggregate
from app.models.chapter import Chapter
from app.models.scorm_package import ScormPackage

HOME_PATH = "/"


def scorm_path(course_id: UUID) -> str:
    return f"/courses/{course_id}/scorm"


def chapter_path(course_id: UUID, chapter_id: UUID) -> str:
    return f"/courses/{course_id}/chapters/{chapter_id}"


class AccessOutcome(str, enum.Enum):
    DENIED = "DENIED"
    ROUTED_TO_SCORM = "ROUTED_TO_SCORM"
    ROUTED_TO_CHAPTER = "ROUTED_TO_CHAPTER"


class DenialReason(str, enum.Enum):
    UNAUTHENTICATED = "UNAUTHENTICATED"
    COURSE_UNAVAILABLE = "COURSE_UNAVAILABLE"
    NO_CONTENT = "NO_CONTENT"


@dataclass(frozen=True)
class CourseAccess:
    """Resolved view of one course for one user."""

    aggregate: CourseAggregate
    # None unless the user holds a purchase, or when it is undefined
    progress: Decimal | None
    is_purchased: bool

    @property
    def course_id(self) -> UUID:
        return self.aggregate.course_id

    @property
    def chapters(self) -> tuple[Chapter, ...]:
        return self.aggregate.chapters

    @property
    def scorm_package(self) -> ScormPackage | None:
        return self.aggregate.scorm_package


@dataclass(frozen=True)
class RouteDecision:
    outcome: AccessOutcome
    location: str
    reason: DenialReason | None = None
    chapter_id: UUID | None = None
    access: CourseAccess | None = None

    @classmethod
    def deny(cls, reason: DenialReason, access: CourseAccess | None = None) -> RouteDecision:
        return cls(
            outcome=AccessOutcome.DENIED,
            location=HOME_PATH,
            reason=reason,
            access=access,
        )

    @property
    def is_denied(self) -> bool:
        return self.outcome is AccessOutcome.DENIED


def first_chapter(chapters: Iterable[Chapter]) -> Chapter | None:
    """Lowest-position published chapter."""
    published = [c for c in chapters if c.is_published]
    return min(published, key=lambda c: c.position, default=None)


def decide_route(access: CourseAccess | None) -> RouteDecision:
    if access is None:
        return RouteDecision.deny(DenialReason.COURSE_UNAVAILABLE)

    chapter = first_chapter(access.chapters)
    has_scorm = access.scorm_package is not None

    if chapter is None and not has_scorm:
        return RouteDecision.deny(DenialReason.NO_CONTENT, access)

    # The package wins over chapters and is routed without a purchase check;
    # the SCORM content endpoint enforces ownership.
    if has_scorm:
        return RouteDecision(
            outcome=AccessOutcome.ROUTED_TO_SCORM,
            location=scorm_path(access.course_id),
            access=access,
        )

    if chapter is not None:
        return RouteDecision(
            outcome=AccessOutcome.ROUTED_TO_CHAPTER,
            location=chapter_path(access.course_id, chapter.chapter_id),
            chapter_id=chapter.chapter_id,
            access=access,
        )

    return RouteDecision.deny(DenialReason.NO_CONTENT, access)
