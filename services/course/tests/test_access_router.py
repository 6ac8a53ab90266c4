from decimal import Decimal
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from app.access import service
from app.models.category import Category
from factories import make_aggregate, make_chapter, make_course


@pytest.fixture
def catalog(monkeypatch) -> dict:
    """Aggregates by course id plus the set of (user, course) purchases."""
    state: dict = {"courses": {}, "purchases": set(), "progress_calls": 0}

    async def find_purchase(db, user_id, course_id):
        return object() if (user_id, course_id) in state["purchases"] else None

    async def get_published_course(db, course_id):
        return state["courses"].get(course_id)

    async def get_progress(db, user_id, course_id):
        state["progress_calls"] += 1
        return Decimal("25.00")

    monkeypatch.setattr(service, "find_purchase", find_purchase)
    monkeypatch.setattr(service, "get_published_course", get_published_course)
    monkeypatch.setattr(service, "get_progress", get_progress)
    return state


def test_anonymous_access_is_denied(client: TestClient, catalog) -> None:
    response = client.get(f"/api/v1/courses/{uuid4()}/access")
    assert response.status_code == 200
    data = response.json()
    assert data["outcome"] == "DENIED"
    assert data["reason"] == "UNAUTHENTICATED"
    assert data["location"] == "/"
    assert data["access"] is None


def test_access_for_purchased_chapter_course(client: TestClient, as_user, learner, catalog) -> None:
    course = make_course(title="Intro to Pharmacology")
    ch1 = make_chapter(course.course_id, 1, is_free=True)
    ch2 = make_chapter(course.course_id, 2)
    catalog["courses"][course.course_id] = make_aggregate(
        course, [ch1, ch2], category=Category(category_id=uuid4(), name="Medicine"),
    )
    catalog["purchases"].add((learner.id, course.course_id))
    as_user(learner)

    response = client.get(f"/api/v1/courses/{course.course_id}/access")

    assert response.status_code == 200
    data = response.json()
    assert data["outcome"] == "ROUTED_TO_CHAPTER"
    assert data["chapter_id"] == str(ch1.chapter_id)
    assert data["location"] == f"/courses/{course.course_id}/chapters/{ch1.chapter_id}"
    access = data["access"]
    assert access["is_purchased"] is True
    assert Decimal(str(access["progress"])) == Decimal("25.00")
    assert access["category"] == "Medicine"
    assert [c["position"] for c in access["chapters"]] == [1, 2]
    assert access["scorm_package"] is None


def test_access_without_purchase_has_null_progress(client: TestClient, as_user, learner, catalog) -> None:
    course = make_course()
    catalog["courses"][course.course_id] = make_aggregate(course, scorm=True)
    as_user(learner)

    data = client.get(f"/api/v1/courses/{course.course_id}/access").json()

    assert data["outcome"] == "ROUTED_TO_SCORM"
    assert data["access"]["is_purchased"] is False
    assert data["access"]["progress"] is None
    assert data["access"]["scorm_package"]["version"] == "1.2"
    assert catalog["progress_calls"] == 0


def test_enter_redirects_to_scorm(client: TestClient, as_user, learner, catalog) -> None:
    course = make_course()
    catalog["courses"][course.course_id] = make_aggregate(course, scorm=True)
    as_user(learner)

    response = client.get(
        f"/api/v1/courses/{course.course_id}/enter", follow_redirects=False,
    )

    assert response.status_code == 307
    assert response.headers["location"] == f"/courses/{course.course_id}/scorm"


def test_enter_unknown_course_redirects_home(client: TestClient, as_user, learner, catalog) -> None:
    as_user(learner)
    response = client.get(f"/api/v1/courses/{uuid4()}/enter", follow_redirects=False)
    assert response.status_code == 307
    assert response.headers["location"] == "/"


def test_store_outage_redirects_home(client: TestClient, as_user, learner, monkeypatch) -> None:
    async def broken(*args):
        raise ConnectionError("database is down")

    monkeypatch.setattr(service, "find_purchase", broken)
    monkeypatch.setattr(service, "get_published_course", broken)
    as_user(learner)

    response = client.get(f"/api/v1/courses/{uuid4()}/enter", follow_redirects=False)

    assert response.status_code == 307
    assert response.headers["location"] == "/"
