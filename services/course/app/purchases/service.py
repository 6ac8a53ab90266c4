"""Purchase service — the entitlement store.

A purchase row keyed by (user_id, course_id) is the only thing that
grants ownership of a course. No FastAPI imports here.
"""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import (
    AlreadyPurchasedError,
    CourseNotFoundError,
    CourseNotPublishedError,
    PaymentRequiredError,
    PurchaseNotFoundError,
)
from app.models.course import Course
from app.models.purchase import Purchase

logger = logging.getLogger(__name__)


def purchase_lookup_stmt(user_id: UUID, course_id: UUID):
    return select(Purchase).where(
        Purchase.user_id == user_id,
        Purchase.course_id == course_id,
    )


async def find_purchase(
    db: AsyncSession, user_id: UUID, course_id: UUID,
) -> Purchase | None:
    result = await db.execute(purchase_lookup_stmt(user_id, course_id))
    return result.scalar_one_or_none()


async def get_purchase(db: AsyncSession, user_id: UUID, course_id: UUID) -> Purchase:
    purchase = await find_purchase(db, user_id, course_id)
    if purchase is None:
        raise PurchaseNotFoundError(str(course_id))
    return purchase


async def _create_purchase(db: AsyncSession, user_id: UUID, course_id: UUID) -> Purchase:
    purchase = Purchase(user_id=user_id, course_id=course_id)
    db.add(purchase)
    await db.flush()
    await db.refresh(purchase)
    return purchase


async def _insert_purchase(db: AsyncSession, user_id: UUID, course_id: UUID) -> Purchase | None:
    """Insert in a savepoint; ``None`` if uq_purchases_user_course already holds the pair."""
    try:
        async with db.begin_nested():
            return await _create_purchase(db, user_id, course_id)
    except IntegrityError:
        logger.info("Purchase %s/%s already recorded", user_id, course_id)
        return None


async def enroll(db: AsyncSession, user_id: UUID, course_id: UUID) -> Purchase:
    """Self-enrollment into a free, published course."""
    course = await db.get(Course, course_id)
    if course is None:
        raise CourseNotFoundError(str(course_id))
    if not course.is_published:
        raise CourseNotPublishedError()
    if not course.is_free:
        raise PaymentRequiredError()
    if await find_purchase(db, user_id, course_id) is not None:
        raise AlreadyPurchasedError()
    purchase = await _insert_purchase(db, user_id, course_id)
    if purchase is None:
        raise AlreadyPurchasedError()
    return purchase


async def grant_purchase(db: AsyncSession, course_id: UUID, user_id: UUID) -> Purchase:
    """Record an entitlement on behalf of a user (admin or settled payment).

    Idempotent: an existing purchase is returned unchanged, including when
    a concurrent grant inserts the same pair first.
    """
    course = await db.get(Course, course_id)
    if course is None:
        raise CourseNotFoundError(str(course_id))
    existing = await find_purchase(db, user_id, course_id)
    if existing is not None:
        return existing
    purchase = await _insert_purchase(db, user_id, course_id)
    if purchase is None:
        return await get_purchase(db, user_id, course_id)
    logger.info("Granted course %s to user %s", course_id, user_id)
    return purchase
