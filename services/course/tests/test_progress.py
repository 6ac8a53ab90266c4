from decimal import Decimal
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.dialects import postgresql

from app.exceptions import ChapterNotFoundError, NotPurchasedError
from app.models.user_progress import UserProgress
from app.progress import service
from app.progress.service import compute_percentage
from factories import make_chapter, result_of


@pytest.mark.parametrize(
    ("completed", "total", "expected"),
    [
        (0, 4, Decimal("0.00")),
        (1, 3, Decimal("33.33")),
        (2, 3, Decimal("66.67")),
        (5, 5, Decimal("100.00")),
    ],
)
def test_compute_percentage(completed, total, expected) -> None:
    assert compute_percentage(completed, total) == expected


def test_percentage_undefined_without_published_chapters() -> None:
    assert compute_percentage(0, 0) is None


@pytest.mark.asyncio
async def test_get_progress_counts_completed_published_chapters(db) -> None:
    db.scalar.side_effect = [4, 1]
    assert await service.get_progress(db, uuid4(), uuid4()) == Decimal("25.00")


@pytest.mark.asyncio
async def test_get_progress_none_for_course_without_published_chapters(db) -> None:
    db.scalar.side_effect = [0]
    assert await service.get_progress(db, uuid4(), uuid4()) is None
    assert db.scalar.await_count == 1


@pytest.mark.asyncio
async def test_mark_progress_requires_purchase(db, monkeypatch) -> None:
    course_id = uuid4()
    db.scalar.return_value = make_chapter(course_id, 1)

    async def no_purchase(db, user_id, course_id):
        return None

    monkeypatch.setattr(service, "find_purchase", no_purchase)

    with pytest.raises(NotPurchasedError):
        await service.mark_chapter_progress(db, uuid4(), course_id, uuid4(), is_completed=True)


@pytest.mark.asyncio
async def test_mark_progress_unknown_chapter(db) -> None:
    db.scalar.return_value = None
    with pytest.raises(ChapterNotFoundError):
        await service.mark_chapter_progress(db, uuid4(), uuid4(), uuid4(), is_completed=True)


@pytest.mark.asyncio
async def test_mark_progress_on_unpublished_course_is_not_found(db, monkeypatch) -> None:
    async def purchased(db, user_id, course_id):
        return object()

    monkeypatch.setattr(service, "find_purchase", purchased)
    db.scalar.return_value = None

    with pytest.raises(ChapterNotFoundError):
        await service.mark_chapter_progress(db, uuid4(), uuid4(), uuid4(), is_completed=True)

    stmt = db.scalar.await_args.args[0]
    assert "courses.is_published IS true" in str(stmt.compile(dialect=postgresql.dialect()))
    db.add.assert_not_called()


@pytest.mark.asyncio
async def test_mark_progress_creates_row_and_returns_course_progress(db, monkeypatch) -> None:
    course_id = uuid4()
    chapter = make_chapter(course_id, 1)
    user_id = uuid4()
    db.scalar.return_value = chapter
    db.execute.return_value = result_of(None)

    async def purchased(db, user_id, course_id):
        return object()

    async def progress(db, user_id, course_id):
        return Decimal("50.00")

    monkeypatch.setattr(service, "find_purchase", purchased)
    monkeypatch.setattr(service, "get_progress", progress)

    row, course_progress = await service.mark_chapter_progress(
        db, user_id, course_id, chapter.chapter_id, is_completed=True,
    )

    assert isinstance(row, UserProgress)
    assert row.user_id == user_id
    assert row.is_completed is True
    assert course_progress == Decimal("50.00")
    db.add.assert_called_once_with(row)


@pytest.mark.asyncio
async def test_mark_progress_updates_existing_row(db, monkeypatch) -> None:
    course_id = uuid4()
    chapter = make_chapter(course_id, 1)
    existing = UserProgress(user_id=uuid4(), chapter_id=chapter.chapter_id, is_completed=True)
    db.scalar.return_value = chapter
    db.execute.return_value = result_of(existing)

    async def purchased(db, user_id, course_id):
        return object()

    async def progress(db, user_id, course_id):
        return Decimal("0.00")

    monkeypatch.setattr(service, "find_purchase", purchased)
    monkeypatch.setattr(service, "get_progress", progress)

    row, _ = await service.mark_chapter_progress(
        db, existing.user_id, course_id, chapter.chapter_id, is_completed=False,
    )

    assert row is existing
    assert row.is_completed is False
    db.add.assert_not_called()


def test_progress_endpoint_forbidden_without_purchase(
    client: TestClient, as_user, learner, monkeypatch,
) -> None:
    async def mark(db, user_id, course_id, chapter_id, *, is_completed):
        raise NotPurchasedError()

    monkeypatch.setattr(service, "mark_chapter_progress", mark)
    as_user(learner)

    response = client.put(
        f"/api/v1/courses/{uuid4()}/chapters/{uuid4()}/progress",
        json={"is_completed": True},
    )

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "forbidden"
