"""Access resolver — decides whether and how a user enters a course.

Resolution is a single pass per request:

    START → ENTITLEMENT_CHECKED → COURSE_LOADED
          → PROGRESS_COMPUTED | PROGRESS_SKIPPED → ROUTED

with terminal outcomes DENIED, ROUTED_TO_SCORM and ROUTED_TO_CHAPTER.
Nothing here raises for a missing course, a missing purchase or a failed
lookup: each collaborator call goes through ``lookup.guarded`` and any
failure degrades to absence.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import TypeVar
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.access.decision import CourseAccess, DenialReason, RouteDecision, decide_route
from app.access.lookup import guarded, value_or_none
from app.courses.service import get_published_course
from app.progress.service import get_progress
from app.purchases.service import find_purchase
from shared.models.user import CurrentUser

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def _in_savepoint(db: AsyncSession, lookup: Awaitable[T]) -> T:
    """Run one lookup inside a SAVEPOINT.

    A failed statement aborts the enclosing PostgreSQL transaction; rolling
    back to the savepoint keeps the session usable for the next lookup.
    """
    async with db.begin_nested():
        return await lookup


async def resolve_course_access(
    db: AsyncSession, user_id: UUID, course_id: UUID,
) -> CourseAccess | None:
    """Course aggregate, ownership and progress for ``user_id``; ``None`` if unavailable."""
    purchase = value_or_none(
        await guarded("purchase", _in_savepoint(db, find_purchase(db, user_id, course_id)))
    )
    is_purchased = purchase is not None
    logger.debug(
        "access %s/%s ENTITLEMENT_CHECKED purchased=%s", user_id, course_id, is_purchased,
    )

    aggregate = value_or_none(
        await guarded("course", _in_savepoint(db, get_published_course(db, course_id)))
    )
    if aggregate is None:
        logger.debug("access %s/%s DENIED course unavailable", user_id, course_id)
        return None
    logger.debug("access %s/%s COURSE_LOADED", user_id, course_id)

    progress = None
    if is_purchased:
        progress = value_or_none(
            await guarded("progress", _in_savepoint(db, get_progress(db, user_id, course_id)))
        )
        logger.debug("access %s/%s PROGRESS_COMPUTED %s", user_id, course_id, progress)
    else:
        logger.debug("access %s/%s PROGRESS_SKIPPED", user_id, course_id)

    return CourseAccess(aggregate=aggregate, progress=progress, is_purchased=is_purchased)


async def resolve_route(
    db: AsyncSession, user: CurrentUser | None, course_id: UUID,
) -> RouteDecision:
    if user is None:
        return RouteDecision.deny(DenialReason.UNAUTHENTICATED)
    access = await resolve_course_access(db, user.id, course_id)
    decision = decide_route(access)
    logger.debug(
        "access %s/%s %s -> %s", user.id, course_id, decision.outcome.value, decision.location,
    )
    return decision
