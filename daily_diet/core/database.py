import logging

from daily_diet.core.base import Base
from daily_diet.core.config import settings
from daily_diet.core.db import engine

# Модели должны быть импортированы до create_all
from daily_diet.models.user import User  # noqa: F401
from daily_diet.models.meal import Meal  # noqa: F401

logger = logging.getLogger(__name__)


async def init_database():
    """Инициализация базы данных"""
    async with engine.begin() as conn:
        if settings.RESET_DATABASE:
            logger.warning("RESET_DATABASE=true - пересоздаем БД")
            await conn.run_sync(Base.metadata.drop_all)

        await conn.run_sync(Base.metadata.create_all)
        logger.info("Таблицы БД созданы/проверены")
