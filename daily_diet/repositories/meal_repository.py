import logging
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import and_, delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from daily_diet.models.meal import Meal

logger = logging.getLogger(__name__)


def owned_meal_clause(meal_id: UUID, user_id: UUID):
    """Предикат "прием пищи с этим id и этим владельцем".

    Используется всеми операциями по id, поэтому чужой прием пищи
    неотличим от несуществующего.
    """
    return and_(Meal.id == meal_id, Meal.user_id == user_id)


class MealRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_for_user(self, user_id: UUID) -> List[Meal]:
        result = await self.db.execute(
            select(Meal)
            .where(Meal.user_id == user_id)
            .order_by(Meal.datetime.desc())
        )
        return list(result.scalars().all())

    async def get_owned(self, meal_id: UUID, user_id: UUID) -> Optional[Meal]:
        result = await self.db.execute(
            select(Meal).where(owned_meal_clause(meal_id, user_id))
        )
        return result.scalar_one_or_none()

    async def create(self, user_id: UUID, data: Dict[str, Any]) -> Meal:
        meal = Meal(user_id=user_id, **data)
        self.db.add(meal)
        await self.db.commit()
        await self.db.refresh(meal)
        logger.debug("Пользователь %s создал прием пищи %s", user_id, meal.id)
        return meal

    async def update_owned(self, meal_id: UUID, user_id: UUID, fields: Dict[str, Any]) -> bool:
        """Частичное обновление одним UPDATE. Возвращает False, если строки нет или она чужая."""
        if not fields:
            return await self.get_owned(meal_id, user_id) is not None

        result = await self.db.execute(
            update(Meal)
            .where(owned_meal_clause(meal_id, user_id))
            .values(**fields)
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        updated = result.rowcount > 0
        if updated:
            logger.debug("Пользователь %s обновил прием пищи %s: %s", user_id, meal_id, sorted(fields))
        return updated

    async def delete_owned(self, meal_id: UUID, user_id: UUID) -> bool:
        result = await self.db.execute(
            delete(Meal)
            .where(owned_meal_clause(meal_id, user_id))
            .execution_options(synchronize_session=False)
        )
        await self.db.commit()
        deleted = result.rowcount > 0
        if deleted:
            logger.debug("Пользователь %s удалил прием пищи %s", user_id, meal_id)
        return deleted

    async def count_by_diet(self, user_id: UUID) -> Tuple[int, int, int]:
        """Счетчики (всего, в диете, вне диеты) одним агрегирующим запросом."""
        result = await self.db.execute(
            select(
                func.count(Meal.id),
                func.count(Meal.id).filter(Meal.in_diet.is_(True)),
                func.count(Meal.id).filter(Meal.in_diet.is_(False)),
            ).where(Meal.user_id == user_id)
        )
        total, diet, not_diet = result.one()
        return int(total or 0), int(diet or 0), int(not_diet or 0)

    async def diet_flags_by_datetime_desc(self, user_id: UUID) -> List[bool]:
        result = await self.db.execute(
            select(Meal.in_diet)
            .where(Meal.user_id == user_id)
            .order_by(Meal.datetime.desc())
        )
        return [bool(flag) for flag in result.scalars().all()]
