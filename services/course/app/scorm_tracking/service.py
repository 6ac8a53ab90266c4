"""SCORM tracking service — runtime state committed by the SCORM player.

Access follows the SCORM launch rule: purchasers and the course owner only.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.courses.service import get_scorm_launch
from app.models.enums import ScormCompletionStatus
from app.models.scorm_package import ScormPackage
from app.models.scorm_tracking import ScormTracking

logger = logging.getLogger(__name__)


def tracking_lookup_stmt(user_id: UUID, scorm_package_id: UUID):
    return select(ScormTracking).where(
        ScormTracking.user_id == user_id,
        ScormTracking.scorm_package_id == scorm_package_id,
    )


async def _find_tracking(
    db: AsyncSession, user_id: UUID, scorm_package_id: UUID,
) -> ScormTracking | None:
    result = await db.execute(tracking_lookup_stmt(user_id, scorm_package_id))
    return result.scalar_one_or_none()


async def get_tracking(
    db: AsyncSession, user_id: UUID, course_id: UUID,
) -> tuple[ScormPackage, ScormTracking | None]:
    """The package and the caller's stored state, ``None`` before the first commit."""
    _, package = await get_scorm_launch(db, user_id, course_id)
    return package, await _find_tracking(db, user_id, package.scorm_package_id)


async def commit_tracking(
    db: AsyncSession,
    user_id: UUID,
    course_id: UUID,
    *,
    data: dict,
    completion_status: ScormCompletionStatus | None,
    location: str | None,
    score: Decimal | None,
) -> ScormTracking:
    """Receive a SCORM runtime commit (LMSCommit / Commit).

    ``data`` is merged into the stored cmi.* values. Omitted status,
    location and score keep their previous values.
    """
    _, package = await get_scorm_launch(db, user_id, course_id)
    tracking = await _find_tracking(db, user_id, package.scorm_package_id)
    if tracking is None:
        tracking = ScormTracking(
            user_id=user_id,
            scorm_package_id=package.scorm_package_id,
            data={},
            completion_status=ScormCompletionStatus.NOT_ATTEMPTED,
        )
        db.add(tracking)

    tracking.data = {**tracking.data, **data}
    if completion_status is not None:
        tracking.completion_status = completion_status
    if location:
        tracking.location = location
    if score is not None:
        tracking.score = score

    await db.flush()
    await db.refresh(tracking)
    logger.debug(
        "SCORM commit %s/%s status=%s", user_id, package.scorm_package_id,
        tracking.completion_status.value,
    )
    return tracking
