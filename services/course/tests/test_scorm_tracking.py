from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from pydantic import ValidationError

from app.exceptions import ContentNotAccessibleError
from app.models.enums import ScormCompletionStatus
from app.models.scorm_tracking import ScormTracking
from app.scorm_tracking import service
from app.scorm_tracking.schemas import ScormTrackingRequest
from factories import make_course, make_scorm_package, result_of


@pytest.fixture
def launch(monkeypatch) -> dict:
    """SCORM launch gate double; set ``allowed`` to False to deny."""
    course = make_course()
    state = {"course": course, "package": make_scorm_package(course.course_id), "allowed": True}

    async def get_scorm_launch(db, user_id, course_id):
        if not state["allowed"]:
            raise ContentNotAccessibleError()
        return state["course"], state["package"]

    monkeypatch.setattr(service, "get_scorm_launch", get_scorm_launch)
    return state


# ---------------------------------------------------------------------------
# Request schema
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("not attempted", ScormCompletionStatus.NOT_ATTEMPTED),
        ("incomplete", ScormCompletionStatus.INCOMPLETE),
        ("Passed", ScormCompletionStatus.PASSED),
        ("COMPLETED", ScormCompletionStatus.COMPLETED),
    ],
)
def test_completion_status_accepts_runtime_spellings(raw, expected) -> None:
    body = ScormTrackingRequest(data={}, completion_status=raw)
    assert body.completion_status is expected


def test_unknown_completion_status_is_rejected() -> None:
    with pytest.raises(ValidationError):
        ScormTrackingRequest(data={}, completion_status="browsed")


def test_data_is_required() -> None:
    with pytest.raises(ValidationError):
        ScormTrackingRequest(completion_status="completed")


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_get_tracking_before_first_commit(db, launch) -> None:
    db.execute.return_value = result_of(None)

    package, tracking = await service.get_tracking(db, uuid4(), launch["course"].course_id)

    assert package is launch["package"]
    assert tracking is None


@pytest.mark.asyncio
async def test_first_commit_creates_row(db, launch) -> None:
    db.execute.return_value = result_of(None)
    user_id = uuid4()

    tracking = await service.commit_tracking(
        db, user_id, launch["course"].course_id,
        data={"cmi.core.lesson_status": "incomplete"},
        completion_status=None,
        location="slide-3",
        score=None,
    )

    assert tracking.user_id == user_id
    assert tracking.scorm_package_id == launch["package"].scorm_package_id
    assert tracking.data == {"cmi.core.lesson_status": "incomplete"}
    assert tracking.completion_status is ScormCompletionStatus.NOT_ATTEMPTED
    assert tracking.location == "slide-3"
    db.add.assert_called_once_with(tracking)


@pytest.mark.asyncio
async def test_commit_merges_into_existing_row(db, launch) -> None:
    existing = ScormTracking(
        user_id=uuid4(),
        scorm_package_id=launch["package"].scorm_package_id,
        data={"cmi.core.lesson_location": "slide-3", "cmi.suspend_data": "a"},
        completion_status=ScormCompletionStatus.INCOMPLETE,
        location="slide-3",
        score=Decimal("40"),
    )
    db.execute.return_value = result_of(existing)

    tracking = await service.commit_tracking(
        db, existing.user_id, launch["course"].course_id,
        data={"cmi.suspend_data": "b"},
        completion_status=ScormCompletionStatus.PASSED,
        location=None,
        score=None,
    )

    assert tracking is existing
    assert tracking.data == {"cmi.core.lesson_location": "slide-3", "cmi.suspend_data": "b"}
    assert tracking.completion_status is ScormCompletionStatus.PASSED
    assert tracking.location == "slide-3"
    assert tracking.score == Decimal("40")
    db.add.assert_not_called()


@pytest.mark.asyncio
async def test_commit_without_access(db, launch) -> None:
    launch["allowed"] = False
    with pytest.raises(ContentNotAccessibleError):
        await service.commit_tracking(
            db, uuid4(), uuid4(),
            data={}, completion_status=None, location=None, score=None,
        )
    db.add.assert_not_called()


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


def test_get_tracking_defaults_to_not_attempted(
    client: TestClient, as_user, learner, monkeypatch,
) -> None:
    package = make_scorm_package(uuid4())

    async def get_tracking(db, user_id, course_id):
        return package, None

    monkeypatch.setattr(service, "get_tracking", get_tracking)
    as_user(learner)

    response = client.get(f"/api/v1/courses/{package.course_id}/scorm/tracking")

    assert response.status_code == 200
    data = response.json()
    assert data["scorm_package_id"] == str(package.scorm_package_id)
    assert data["data"] == {}
    assert data["completion_status"] == "NOT_ATTEMPTED"
    assert data["location"] is None
    assert data["score"] is None


def test_commit_tracking(client: TestClient, as_user, learner, monkeypatch) -> None:
    seen: dict = {}

    async def commit_tracking(db, user_id, course_id, **fields):
        seen.update(fields)
        return ScormTracking(
            user_id=user_id,
            scorm_package_id=uuid4(),
            data=fields["data"],
            completion_status=fields["completion_status"],
            location=fields["location"],
            score=fields["score"],
            updated_at=datetime.now(timezone.utc),
        )

    monkeypatch.setattr(service, "commit_tracking", commit_tracking)
    as_user(learner)

    response = client.post(
        f"/api/v1/courses/{uuid4()}/scorm/tracking",
        json={"data": {"cmi.core.score.raw": "80"}, "completion_status": "passed", "score": 80},
    )

    assert response.status_code == 200
    assert seen["completion_status"] is ScormCompletionStatus.PASSED
    assert response.json()["completion_status"] == "PASSED"


def test_commit_tracking_forbidden(client: TestClient, as_user, learner, monkeypatch) -> None:
    async def commit_tracking(db, user_id, course_id, **fields):
        raise ContentNotAccessibleError()

    monkeypatch.setattr(service, "commit_tracking", commit_tracking)
    as_user(learner)

    response = client.post(f"/api/v1/courses/{uuid4()}/scorm/tracking", json={"data": {}})

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "forbidden"


def test_commit_tracking_requires_data(client: TestClient, as_user, learner) -> None:
    as_user(learner)
    response = client.post(
        f"/api/v1/courses/{uuid4()}/scorm/tracking", json={"completion_status": "completed"},
    )
    assert response.status_code == 422
