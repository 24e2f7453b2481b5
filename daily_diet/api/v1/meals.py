from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status

from daily_diet.core.dependencies import SessionContext, get_meal_repository, get_session_context
from daily_diet.repositories.meal_repository import MealRepository
from daily_diet.schemas.meal import MealCreate, MealMetrics, MealRead, MealUpdate
from daily_diet.services.diet_metrics import DietMetricsCalculator

router = APIRouter(prefix="/meals", tags=["meals"])


def meal_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Meal not found")


# Пользователь сессии запрашивается первой строкой каждого обработчика:
# к этому моменту FastAPI уже провалидировал id и тело запроса.

@router.get("/", response_model=List[MealRead])
async def list_meals(
        session: SessionContext = Depends(get_session_context),
        repo: MealRepository = Depends(get_meal_repository),
):
    """Все приемы пищи пользователя, самые свежие первыми"""
    current_user = await session.get_user()
    return await repo.list_for_user(current_user.id)


# Объявлен до /{meal_id}, иначе "metrics" уйдет в разбор UUID
@router.get("/metrics", response_model=MealMetrics)
async def get_metrics(
        session: SessionContext = Depends(get_session_context),
        repo: MealRepository = Depends(get_meal_repository),
):
    """Счетчики приемов пищи и лучшая серия в диете"""
    current_user = await session.get_user()
    total, diet, not_diet = await repo.count_by_diet(current_user.id)
    flags = await repo.diet_flags_by_datetime_desc(current_user.id)
    return DietMetricsCalculator.from_counts(total, diet, not_diet, flags)


@router.get("/{meal_id}", response_model=MealRead)
async def get_meal(
        meal_id: UUID,
        session: SessionContext = Depends(get_session_context),
        repo: MealRepository = Depends(get_meal_repository),
):
    current_user = await session.get_user()
    meal = await repo.get_owned(meal_id, current_user.id)
    if meal is None:
        raise meal_not_found()
    return meal


@router.post("/", status_code=status.HTTP_201_CREATED, response_class=Response)
async def create_meal(
        meal_data: MealCreate,
        session: SessionContext = Depends(get_session_context),
        repo: MealRepository = Depends(get_meal_repository),
):
    """Создать прием пищи. Тело ответа пустое."""
    current_user = await session.get_user()
    await repo.create(current_user.id, meal_data.model_dump())


@router.put("/{meal_id}", status_code=status.HTTP_201_CREATED, response_class=Response)
async def update_meal(
        meal_id: UUID,
        meal_data: MealUpdate,
        session: SessionContext = Depends(get_session_context),
        repo: MealRepository = Depends(get_meal_repository),
):
    """Частично обновить свой прием пищи. Непереданные поля не меняются."""
    current_user = await session.get_user()
    fields = meal_data.model_dump(exclude_unset=True)
    if not await repo.update_owned(meal_id, current_user.id, fields):
        raise meal_not_found()


@router.delete("/{meal_id}", status_code=status.HTTP_204_NO_CONTENT, response_class=Response)
async def delete_meal(
        meal_id: UUID,
        session: SessionContext = Depends(get_session_context),
        repo: MealRepository = Depends(get_meal_repository),
):
    current_user = await session.get_user()
    if not await repo.delete_owned(meal_id, current_user.id):
        raise meal_not_found()
