import uuid

from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship

from daily_diet.core.base import Base
from daily_diet.models.user import utcnow


class Meal(Base):
    __tablename__ = "meals"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    # Время приема пищи от клиента; по нему сортируем, не по created_at
    datetime = Column(DateTime(timezone=True), nullable=False)
    in_diet = Column(Boolean, nullable=False)
    user_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    user = relationship("User", back_populates="meals")
