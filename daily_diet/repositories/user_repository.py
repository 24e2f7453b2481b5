import logging
from typing import Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from daily_diet.models.user import User

logger = logging.getLogger(__name__)


class UserRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_session_id(self, session_id: str) -> Optional[User]:
        """Найти пользователя по sessionId. Только чтение, отсутствие - не ошибка."""
        result = await self.db.execute(select(User).where(User.session_id == session_id))
        return result.scalar_one_or_none()

    async def get_or_create_by_session(
        self,
        session_id: str,
        name: Optional[str] = None,
    ) -> Tuple[User, bool]:
        """
        Идемпотентно получить пользователя для sessionId, создав его при отсутствии.
        Возвращает (user, created).
        """
        user = await self.get_by_session_id(session_id)
        if user is not None:
            return user, False

        try:
            user = await self.create_user(User(session_id=session_id, name=name))
        except IntegrityError:
            # Параллельный запрос с тем же sessionId успел создать пользователя
            await self.db.rollback()
            user = await self.get_by_session_id(session_id)
            if user is None:
                raise
            return user, False

        logger.info("Создан пользователь %s для новой сессии", user.id)
        return user, True

    async def create_user(self, user: User) -> User:
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        return user
