from sqlalchemy.orm import Session

from src.subtrack.infra.repositories import SqlSubscriptionRepo

class SqlAlchemyUoW:
    def __init__(self, db: Session):
        self.db = db

        self.subscriptions = SqlSubscriptionRepo(db)

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
