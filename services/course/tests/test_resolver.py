from decimal import Decimal
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from app.access import service
from app.access.decision import AccessOutcome, DenialReason
from factories import (
    AbortingSession,
    make_aggregate,
    make_chapter,
    make_course,
    make_scorm_package,
    mock_session,
    result_of,
)
from shared.models.user import CurrentUser


class Collaborators:
    """Fake entitlement store, course aggregator and progress calculator."""

    def __init__(self, *, purchase=None, aggregate=None, progress=Decimal("50.00")):
        self.purchase = purchase
        self.aggregate = aggregate
        self.progress = progress
        self.calls: dict[str, int] = {"purchase": 0, "course": 0, "progress": 0}
        self.db = mock_session()

    async def find_purchase(self, db, user_id, course_id):
        self.calls["purchase"] += 1
        if isinstance(self.purchase, Exception):
            raise self.purchase
        return self.purchase

    async def get_published_course(self, db, course_id):
        self.calls["course"] += 1
        if isinstance(self.aggregate, Exception):
            raise self.aggregate
        if self.aggregate is None or self.aggregate.course_id != course_id:
            return None
        if not self.aggregate.course.is_published:
            return None
        return self.aggregate

    async def get_progress(self, db, user_id, course_id):
        self.calls["progress"] += 1
        if isinstance(self.progress, Exception):
            raise self.progress
        return self.progress


@pytest.fixture
def fakes(monkeypatch) -> Collaborators:
    fake = Collaborators()
    monkeypatch.setattr(service, "find_purchase", fake.find_purchase)
    monkeypatch.setattr(service, "get_published_course", fake.get_published_course)
    monkeypatch.setattr(service, "get_progress", fake.get_progress)
    return fake


def _user() -> CurrentUser:
    return CurrentUser(id=uuid4(), email="u@example.com")


# ---------------------------------------------------------------------------
# resolve_course_access
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_purchased_course_includes_progress(fakes) -> None:
    course = make_course()
    fakes.aggregate = make_aggregate(course, [make_chapter(course.course_id, 1)])
    fakes.purchase = object()

    access = await service.resolve_course_access(fakes.db, uuid4(), course.course_id)

    assert access is not None
    assert access.is_purchased is True
    assert access.progress == Decimal("50.00")
    assert fakes.calls["progress"] == 1


@pytest.mark.asyncio
async def test_progress_not_computed_without_purchase(fakes) -> None:
    course = make_course()
    fakes.aggregate = make_aggregate(course, [make_chapter(course.course_id, 1)])

    access = await service.resolve_course_access(fakes.db, uuid4(), course.course_id)

    assert access is not None
    assert access.is_purchased is False
    assert access.progress is None
    assert fakes.calls["progress"] == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("purchased", [True, False])
async def test_unavailable_course_resolves_to_none(fakes, purchased) -> None:
    fakes.purchase = object() if purchased else None

    access = await service.resolve_course_access(fakes.db, uuid4(), uuid4())

    assert access is None
    assert fakes.calls["progress"] == 0


@pytest.mark.asyncio
async def test_entitlement_lookup_happens_even_for_missing_course(fakes) -> None:
    await service.resolve_course_access(fakes.db, uuid4(), uuid4())
    assert fakes.calls["purchase"] == 1
    assert fakes.calls["course"] == 1


@pytest.mark.asyncio
async def test_failed_purchase_lookup_reads_as_not_purchased(fakes) -> None:
    course = make_course()
    fakes.aggregate = make_aggregate(course, scorm=True)
    fakes.purchase = ConnectionError("store down")

    access = await service.resolve_course_access(fakes.db, uuid4(), course.course_id)

    assert access is not None
    assert access.is_purchased is False
    assert fakes.calls["progress"] == 0


@pytest.mark.asyncio
async def test_failed_course_lookup_reads_as_unavailable(fakes) -> None:
    fakes.aggregate = RuntimeError("malformed row")
    fakes.purchase = object()

    access = await service.resolve_course_access(fakes.db, uuid4(), uuid4())

    assert access is None


@pytest.mark.asyncio
async def test_failed_progress_lookup_keeps_ownership(fakes) -> None:
    course = make_course()
    fakes.aggregate = make_aggregate(course, [make_chapter(course.course_id, 1)])
    fakes.purchase = object()
    fakes.progress = TimeoutError()

    access = await service.resolve_course_access(fakes.db, uuid4(), course.course_id)

    assert access is not None
    assert access.is_purchased is True
    assert access.progress is None


# ---------------------------------------------------------------------------
# resolve_route
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_anonymous_caller_is_denied_without_lookups(fakes) -> None:
    decision = await service.resolve_route(fakes.db, None, uuid4())

    assert decision.outcome is AccessOutcome.DENIED
    assert decision.reason is DenialReason.UNAUTHENTICATED
    assert decision.location == "/"
    assert fakes.calls == {"purchase": 0, "course": 0, "progress": 0}


@pytest.mark.asyncio
async def test_example_c2_scorm_without_purchase(fakes) -> None:
    course = make_course(title="C2")
    fakes.aggregate = make_aggregate(course, scorm=True)

    decision = await service.resolve_route(fakes.db, _user(), course.course_id)

    assert decision.outcome is AccessOutcome.ROUTED_TO_SCORM
    assert decision.location == f"/courses/{course.course_id}/scorm"
    assert decision.access.is_purchased is False


@pytest.mark.asyncio
async def test_example_c1_purchased_routes_to_first_published_chapter(fakes) -> None:
    course = make_course(title="C1")
    ch1 = make_chapter(course.course_id, 1)
    ch2 = make_chapter(course.course_id, 2)
    fakes.aggregate = make_aggregate(course, [ch1, ch2])
    fakes.purchase = object()

    decision = await service.resolve_route(fakes.db, _user(), course.course_id)

    assert decision.outcome is AccessOutcome.ROUTED_TO_CHAPTER
    assert decision.chapter_id == ch1.chapter_id
    assert decision.access.progress == Decimal("50.00")


@pytest.mark.asyncio
async def test_example_c3_missing_matches_c4_unpublished(fakes) -> None:
    c4 = make_course(title="C4", is_published=False)
    fakes.aggregate = make_aggregate(c4, [make_chapter(c4.course_id, 1)], scorm=True)
    fakes.purchase = object()
    user = _user()

    missing = await service.resolve_route(fakes.db, user, uuid4())
    unpublished = await service.resolve_route(fakes.db, user, c4.course_id)

    assert missing == unpublished
    assert unpublished.outcome is AccessOutcome.DENIED
    assert unpublished.reason is DenialReason.COURSE_UNAVAILABLE
    assert unpublished.location == "/"
    assert fakes.calls["progress"] == 0


@pytest.mark.asyncio
async def test_same_inputs_give_same_decision(fakes) -> None:
    course = make_course()
    fakes.aggregate = make_aggregate(course, [make_chapter(course.course_id, 3)])
    user = _user()

    first = await service.resolve_route(fakes.db, user, course.course_id)
    second = await service.resolve_route(fakes.db, user, course.course_id)

    assert first.outcome == second.outcome
    assert first.location == second.location


@pytest.mark.asyncio
async def test_course_with_no_content_is_denied(fakes) -> None:
    course = make_course()
    fakes.aggregate = make_aggregate(course)
    fakes.purchase = object()

    decision = await service.resolve_route(fakes.db, _user(), course.course_id)

    assert decision.outcome is AccessOutcome.DENIED
    assert decision.reason is DenialReason.NO_CONTENT


# ---------------------------------------------------------------------------
# Failed statements inside one transaction
# ---------------------------------------------------------------------------


def _statement_timeout() -> OperationalError:
    return OperationalError(
        "SELECT", {}, Exception("canceling statement due to statement timeout"),
    )


def _scorm_course():
    course = make_course(title="SCORM")
    course.scorm_package = make_scorm_package(course.course_id)
    return course


@pytest.mark.asyncio
async def test_failed_purchase_query_does_not_poison_course_lookup() -> None:
    course = _scorm_course()
    db = AbortingSession([_statement_timeout(), result_of(course), result_of([])])

    decision = await service.resolve_route(db, _user(), course.course_id)

    assert decision.outcome is AccessOutcome.ROUTED_TO_SCORM
    assert decision.location == f"/courses/{course.course_id}/scorm"
    assert decision.access.is_purchased is False
    assert db.rollbacks == 1
    assert db.aborted is False


@pytest.mark.asyncio
async def test_failed_progress_query_keeps_course_and_ownership() -> None:
    course = make_course()
    chapter = make_chapter(course.course_id, 1)
    purchase = object()
    db = AbortingSession([
        result_of(purchase),
        result_of(course),
        result_of([chapter]),
        _statement_timeout(),
    ])

    decision = await service.resolve_route(db, _user(), course.course_id)

    assert decision.outcome is AccessOutcome.ROUTED_TO_CHAPTER
    assert decision.chapter_id == chapter.chapter_id
    assert decision.access.is_purchased is True
    assert decision.access.progress is None
    assert db.savepoints == 3
    assert db.rollbacks == 1


@pytest.mark.asyncio
async def test_each_lookup_runs_in_its_own_savepoint(fakes) -> None:
    course = make_course()
    fakes.aggregate = make_aggregate(course, [make_chapter(course.course_id, 1)])
    fakes.purchase = object()

    await service.resolve_course_access(fakes.db, uuid4(), course.course_id)

    assert fakes.db.begin_nested.call_count == 3
