from typing import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from src.subtrack.infra.db import get_session_factory
from src.subtrack.infra.uow import SqlAlchemyUoW
from src.subtrack.domain.contracts.uow import UoW

from src.subtrack.services.subscription_service import SubscriptionService


def get_db() -> Generator[Session, None, None]:
    """
    Dependency для SQLAlchemy-сессии.
    Сессия создаётся на запрос и гарантированно закрывается.
    """
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


def get_uow(db: Session = Depends(get_db)) -> UoW:
    """
    Dependency для Unit of Work.
    """
    return SqlAlchemyUoW(db)


# Service factories (composition root)
def get_subscription_service(uow: UoW = Depends(get_uow)) -> SubscriptionService:
    return SubscriptionService(uow)
