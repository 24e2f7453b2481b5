"""
Общие фикстуры для тестов Daily Diet.

Стратегия:
- Тестовое FastAPI-приложение создаётся без startup-событий (нет подключения к БД).
- UserRepository и MealRepository заменяются на AsyncMock через dependency_overrides.
- Для эндпоинтов под авторизацией get_session_context подменяется на AsyncMock,
  чей get_user() возвращает нужного пользователя.
- Для проверки сессионной cookie контекст сессии не подменяется (фикстура client).
"""

import uuid
import pytest
from unittest.mock import AsyncMock, MagicMock
from httpx import AsyncClient, ASGITransport
from fastapi import FastAPI
from datetime import datetime, timezone
from typing import AsyncGenerator
from sqlalchemy.exc import SQLAlchemyError

from daily_diet.api.router import api_router
from daily_diet.core.config import settings
from daily_diet.core.dependencies import SessionContext, get_meal_repository, get_session_context, get_user_repository
from daily_diet.core.session import SessionCookieMiddleware
from daily_diet.main import database_exception_handler
from daily_diet.models.meal import Meal
from daily_diet.models.user import User
from daily_diet.repositories.meal_repository import MealRepository
from daily_diet.repositories.user_repository import UserRepository


# ---------------------------------------------------------------------------
# Вспомогательные функции
# ---------------------------------------------------------------------------

def create_test_app() -> FastAPI:
    """Тестовое FastAPI-приложение без startup-событий."""
    test_app = FastAPI(title="Daily Diet Test App")
    test_app.add_middleware(SessionCookieMiddleware)
    test_app.include_router(api_router)
    test_app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    return test_app


def session_headers(session_id: str) -> dict:
    """Заголовок Cookie с sessionId."""
    return {"Cookie": f"{settings.SESSION_COOKIE_NAME}={session_id}"}


def session_from_response(response) -> str:
    """Достать sessionId из Set-Cookie ответа."""
    raw = response.headers["set-cookie"]
    name, value = raw.split(";", 1)[0].split("=", 1)
    assert name == settings.SESSION_COOKIE_NAME
    return value


def make_meal(user_id: uuid.UUID, **overrides) -> Meal:
    fields = dict(
        id=uuid.uuid4(),
        name="Омлет",
        description="Два яйца и шпинат",
        datetime=datetime(2024, 3, 1, 8, 30, tzinfo=timezone.utc),
        in_diet=True,
        user_id=user_id,
        created_at=datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc),
    )
    fields.update(overrides)
    return Meal(**fields)


# ---------------------------------------------------------------------------
# Фикстуры пользователей
# ---------------------------------------------------------------------------

@pytest.fixture
def user_fixture() -> User:
    """Пользователь сессии "session-a"."""
    return User(
        id=uuid.uuid4(),
        name="Ana",
        session_id="session-a",
        created_at=datetime.now(timezone.utc),
    )


# ---------------------------------------------------------------------------
# Фикстуры для зависимостей
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_user_repo() -> AsyncMock:
    repo = AsyncMock(spec=UserRepository)
    repo.get_by_session_id.return_value = None
    return repo


@pytest.fixture
def mock_meal_repo() -> AsyncMock:
    repo = AsyncMock(spec=MealRepository)
    repo.list_for_user.return_value = []
    repo.get_owned.return_value = None
    repo.update_owned.return_value = False
    repo.delete_owned.return_value = False
    repo.count_by_diet.return_value = (0, 0, 0)
    repo.diet_flags_by_datetime_desc.return_value = []
    return repo


@pytest.fixture
def mock_session(user_fixture) -> AsyncMock:
    """Контекст сессии, уже знающий пользователя."""
    session = AsyncMock(spec=SessionContext)
    session.session_id = user_fixture.session_id
    session.get_user.return_value = user_fixture
    session.get_or_create_user.return_value = (user_fixture, False)
    return session


@pytest.fixture
def mock_db() -> AsyncMock:
    """
    Мокированная сессия БД для тестов репозиториев.
    execute() возвращает MagicMock с предустановленными методами.
    """
    session = AsyncMock()
    session.add = MagicMock()
    default_result = MagicMock()
    default_result.scalar_one_or_none.return_value = None
    default_result.scalars.return_value.all.return_value = []
    default_result.rowcount = 0
    session.execute.return_value = default_result
    return session


# ---------------------------------------------------------------------------
# HTTP-клиенты
# ---------------------------------------------------------------------------

@pytest.fixture
async def client(mock_user_repo, mock_meal_repo) -> AsyncGenerator[AsyncClient, None]:
    """
    Клиент без подмены контекста сессии: пользователь ищется (и создается)
    по cookie через mock_user_repo.
    """
    app = create_test_app()
    app.dependency_overrides[get_user_repository] = lambda: mock_user_repo
    app.dependency_overrides[get_meal_repository] = lambda: mock_meal_repo
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
async def user_client(mock_session, mock_user_repo, mock_meal_repo) -> AsyncGenerator[AsyncClient, None]:
    """
    Клиент с уже определенным пользователем.
    get_session_context → mock_session (get_user() → user_fixture).
    """
    app = create_test_app()
    app.dependency_overrides[get_user_repository] = lambda: mock_user_repo
    app.dependency_overrides[get_meal_repository] = lambda: mock_meal_repo
    app.dependency_overrides[get_session_context] = lambda: mock_session
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
