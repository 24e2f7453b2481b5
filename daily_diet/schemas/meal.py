import datetime as dt
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, StrictBool, StrictStr, field_validator


def _timestamp_string(value):
    # Только строка с датой: числа (unix time) не принимаем
    if not isinstance(value, str):
        raise ValueError("datetime must be a timestamp string")
    return value


def _as_utc(value: dt.datetime) -> dt.datetime:
    # Время без зоны считаем UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value


class MealCreate(BaseModel):
    name: StrictStr = Field(..., min_length=1, max_length=255)
    description: StrictStr
    datetime: dt.datetime
    in_diet: StrictBool

    @field_validator("datetime", mode="before")
    @classmethod
    def require_timestamp_string(cls, value):
        return _timestamp_string(value)

    @field_validator("datetime")
    @classmethod
    def normalize_datetime(cls, value):
        return _as_utc(value)


class MealUpdate(BaseModel):
    """Частичное обновление: пишем только переданные поля. Явный null - ошибка."""
    name: Optional[StrictStr] = Field(None, min_length=1, max_length=255)
    description: Optional[StrictStr] = None
    datetime: Optional[dt.datetime] = None
    in_diet: Optional[StrictBool] = None

    @field_validator("name", "description", "datetime", "in_diet", mode="before")
    @classmethod
    def reject_null(cls, value):
        # Валидатор срабатывает только для переданных полей
        if value is None:
            raise ValueError("field may be omitted but not null")
        return value

    @field_validator("datetime", mode="before")
    @classmethod
    def require_timestamp_string(cls, value):
        return _timestamp_string(value)

    @field_validator("datetime")
    @classmethod
    def normalize_datetime(cls, value):
        return _as_utc(value)


class MealRead(BaseModel):
    id: UUID
    name: str
    description: str
    datetime: dt.datetime
    in_diet: bool
    user_id: UUID
    created_at: dt.datetime

    class Config:
        from_attributes = True


class MealMetrics(BaseModel):
    total_meals: int = 0
    diet_meals: int = 0
    not_diet_meals: int = 0
    best_diet_sequence: int = 0
