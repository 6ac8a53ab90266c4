"""Purchase router — HTTP layer only."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.purchases import controller
from app.purchases.schemas import GrantPurchaseRequest, PurchaseResponse
from shared.auth.dependencies import get_current_user_required, require_role
from shared.constants import Role
from shared.models.user import CurrentUser

router = APIRouter(prefix="/courses", tags=["Purchases"])


@router.get(
    "/{course_id}/purchase",
    response_model=PurchaseResponse,
    summary="Get my purchase for a course",
    description="404 when the caller has not purchased the course.",
)
async def get_purchase(
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user_required),
) -> PurchaseResponse:
    return await controller.get_purchase(db, user.id, course_id)


@router.post(
    "/{course_id}/enroll",
    response_model=PurchaseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Enroll in a free course",
    description="Creates a purchase for a published course with no price. "
    "Paid courses return 402.",
)
async def enroll(
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user_required),
) -> PurchaseResponse:
    return await controller.enroll(db, user.id, course_id)


@router.post(
    "/{course_id}/purchases",
    response_model=PurchaseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Grant a course to a user (admin)",
)
async def grant_purchase(
    course_id: UUID,
    body: GrantPurchaseRequest,
    db: AsyncSession = Depends(get_db),
    _admin: CurrentUser = Depends(require_role(Role.ADMIN)),
) -> PurchaseResponse:
    return await controller.grant_purchase(db, course_id, body)
