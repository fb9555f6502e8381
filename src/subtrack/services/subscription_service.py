import logging
import uuid
from uuid import UUID

from src.subtrack.domain.contracts.uow import UoW
from src.subtrack.domain.entities.subscription import Subscription
from src.subtrack.domain.errors import SubscriptionError
from src.subtrack.domain.services.validation import validate_input
from src.subtrack.domain.value_objects import ListFilter, SubscriptionInput, SummaryFilter

logger = logging.getLogger(__name__)


class SubscriptionService:
    def __init__(self, uow: UoW):
        self.uow = uow

    def create(self, data: SubscriptionInput) -> Subscription:
        sub = validate_input(data)
        sub.id = uuid.uuid4()

        try:
            created = self.uow.subscriptions.create(sub)
            self.uow.commit()
            return created
        except Exception as e:
            self._fail("create subscription", e)
            raise

    def get(self, sub_id: UUID) -> Subscription:
        try:
            return self.uow.subscriptions.get(sub_id)
        except Exception as e:
            self._fail("get subscription", e)
            raise

    def update(self, sub_id: UUID, data: SubscriptionInput) -> Subscription:
        # Полная перевалидация, частичных обновлений нет
        sub = validate_input(data)
        sub.id = sub_id

        try:
            updated = self.uow.subscriptions.update(sub)
            self.uow.commit()
            return updated
        except Exception as e:
            self._fail("update subscription", e)
            raise

    def delete(self, sub_id: UUID) -> None:
        try:
            self.uow.subscriptions.delete(sub_id)
            self.uow.commit()
        except Exception as e:
            self._fail("delete subscription", e)
            raise

    def list(self, flt: ListFilter) -> list[Subscription]:
        try:
            return self.uow.subscriptions.list(flt)
        except Exception as e:
            self._fail("list subscriptions", e)
            raise

    def summary(self, flt: SummaryFilter) -> int:
        if flt.start is None or flt.end is None:
            raise SubscriptionError.invalid_argument("start and end are required")
        if flt.end < flt.start:
            raise SubscriptionError.invalid_argument("end must be after start")

        try:
            return self.uow.subscriptions.summary(flt)
        except Exception as e:
            self._fail("summary subscriptions", e)
            raise

    def _fail(self, op: str, exc: Exception) -> None:
        self.uow.rollback()
        if isinstance(exc, SubscriptionError):
            logger.warning("%s: %s", op, exc)
        else:
            logger.exception("%s failed", op)
