from sqlalchemy import (
    Column, String, Integer, Date, DateTime, Uuid,
    CheckConstraint, Index,
)
from sqlalchemy.sql import func

from src.subtrack.infra.db import Base


class SubscriptionORM(Base):
    """
    Подписка пользователя на сервис. Даты хранятся с точностью до месяца
    (всегда первое число), timestamps проставляет БД.
    """
    __tablename__ = "subscriptions"

    id = Column(Uuid, primary_key=True)
    service_name = Column(String, nullable=False)
    price = Column(Integer, nullable=False)
    user_id = Column(Uuid, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("price > 0", name="price_positive"),
        CheckConstraint("end_date IS NULL OR end_date >= start_date", name="end_after_start"),
        Index("idx_subscriptions_user", "user_id"),
        Index("idx_subscriptions_service_name", "service_name"),
    )
