from typing import Protocol
from uuid import UUID

from src.subtrack.domain.entities.subscription import Subscription
from src.subtrack.domain.value_objects import ListFilter, SummaryFilter


class SubscriptionRepo(Protocol):
    """
    Контракт хранилища подписок.
    Реализация сама классифицирует ошибки: отсутствие записи -> NOT_FOUND,
    конфликт уникальности -> DUPLICATE, остальное пробрасывается как есть.
    """

    def create(self, sub: Subscription) -> Subscription: ...
    def get(self, sub_id: UUID) -> Subscription: ...
    def update(self, sub: Subscription) -> Subscription: ...
    def delete(self, sub_id: UUID) -> None: ...
    def list(self, flt: ListFilter) -> list[Subscription]: ...
    def summary(self, flt: SummaryFilter) -> int: ...
