from collections.abc import AsyncGenerator, Callable, Generator
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from app.database import get_db
from app.main import app
from factories import mock_session
from shared.auth.dependencies import get_current_user_optional
from shared.constants import Role
from shared.models.user import CurrentUser


@pytest.fixture
def db() -> AsyncMock:
    return mock_session()


@pytest.fixture
def learner() -> CurrentUser:
    return CurrentUser(id=uuid4(), email="learner@example.com", roles=[Role.USER])


@pytest.fixture
def teacher() -> CurrentUser:
    return CurrentUser(id=uuid4(), email="teacher@example.com", roles=[Role.TEACHER])


@pytest.fixture
def admin() -> CurrentUser:
    return CurrentUser(id=uuid4(), email="admin@example.com", roles=[Role.ADMIN])


@pytest.fixture
def as_user() -> Generator[Callable[[CurrentUser | None], None], None, None]:
    """Call with a CurrentUser (or None) to set the caller for HTTP tests."""

    def _set(user: CurrentUser | None) -> None:
        app.dependency_overrides[get_current_user_optional] = lambda: user

    yield _set
    app.dependency_overrides.pop(get_current_user_optional, None)


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    async def _no_db() -> AsyncGenerator[AsyncMock, None]:
        yield mock_session()

    app.dependency_overrides[get_db] = _no_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.pop(get_db, None)
