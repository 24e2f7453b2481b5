from typing import Optional, Tuple

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from daily_diet.core.db import get_db
from daily_diet.core.config import settings
from daily_diet.core.session import read_session_id
from daily_diet.models.user import User
from daily_diet.repositories.meal_repository import MealRepository
from daily_diet.repositories.user_repository import UserRepository


def get_user_repository(db: AsyncSession = Depends(get_db)) -> UserRepository:
    """Фабрика репозитория — инжектируется в эндпоинты через Depends."""
    return UserRepository(db)


def get_meal_repository(db: AsyncSession = Depends(get_db)) -> MealRepository:
    return MealRepository(db)


def user_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")


class SessionContext:
    """
    Сессия текущего запроса. Сама по себе в БД не ходит:
    обработчик вызывает get_user() первой строкой, то есть уже после
    валидации пути и тела, поэтому невалидный запрос не создает пользователя.
    """

    def __init__(self, session_id: Optional[str], repo: UserRepository):
        self.session_id = session_id
        self.repo = repo

    async def get_user(self) -> User:
        """Пользователь сессии; при AUTO_PROVISION_SESSIONS создается при первом обращении."""
        if self.session_id is None:
            raise user_not_found()

        if settings.AUTO_PROVISION_SESSIONS:
            user, _ = await self.repo.get_or_create_by_session(self.session_id)
            return user

        user = await self.repo.get_by_session_id(self.session_id)
        if user is None:
            raise user_not_found()
        return user

    async def get_or_create_user(self, name: Optional[str] = None) -> Tuple[User, bool]:
        """Явная регистрация: идемпотентна для одного sessionId."""
        if self.session_id is None:
            raise user_not_found()
        return await self.repo.get_or_create_by_session(self.session_id, name=name)


def get_session_context(
        request: Request,
        repo: UserRepository = Depends(get_user_repository),
) -> SessionContext:
    return SessionContext(read_session_id(request), repo)
