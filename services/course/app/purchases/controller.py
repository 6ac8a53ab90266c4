"""Purchase controller — maps service results to HTTP responses, catches domain exceptions."""

from __future__ import annotations

from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import (
    AlreadyPurchasedError,
    CourseNotFoundError,
    CourseNotPublishedError,
    PaymentRequiredError,
    PurchaseNotFoundError,
)
from app.purchases import service
from app.purchases.schemas import GrantPurchaseRequest, PurchaseResponse


def _handle_domain_error(exc: Exception) -> HTTPException:
    if isinstance(exc, (CourseNotFoundError, PurchaseNotFoundError)):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, AlreadyPurchasedError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Course already purchased.")
    if isinstance(exc, CourseNotPublishedError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Course is not published.")
    if isinstance(exc, PaymentRequiredError):
        return HTTPException(status_code=status.HTTP_402_PAYMENT_REQUIRED, detail="Payment required for this course.")
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal error.")


async def get_purchase(db: AsyncSession, user_id: UUID, course_id: UUID) -> PurchaseResponse:
    try:
        purchase = await service.get_purchase(db, user_id, course_id)
        return PurchaseResponse.model_validate(purchase)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def enroll(db: AsyncSession, user_id: UUID, course_id: UUID) -> PurchaseResponse:
    try:
        purchase = await service.enroll(db, user_id, course_id)
        return PurchaseResponse.model_validate(purchase)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc


async def grant_purchase(
    db: AsyncSession, course_id: UUID, body: GrantPurchaseRequest,
) -> PurchaseResponse:
    try:
        purchase = await service.grant_purchase(db, course_id, body.user_id)
        return PurchaseResponse.model_validate(purchase)
    except Exception as exc:
        raise _handle_domain_error(exc) from exc
