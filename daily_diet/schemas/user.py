from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    name: Optional[str] = Field(None, max_length=255)


class UserRead(BaseModel):
    id: UUID
    name: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
