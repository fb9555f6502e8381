from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

DEFAULT_LIMIT = 20
MAX_LIMIT = 100


@dataclass(frozen=True)
class SubscriptionInput:
    """
    Сырые поля запроса до валидации.
    """
    service_name: str
    price: int
    user_id: str
    start_date: str
    end_date: Optional[str] = None


@dataclass(frozen=True)
class ListFilter:
    user_id: Optional[UUID] = None
    service_name: Optional[str] = None
    limit: int = 0
    offset: int = 0

    def effective_limit(self) -> int:
        # вне диапазона -> сброс на дефолт, а не обрезка до MAX_LIMIT
        if self.limit <= 0 or self.limit > MAX_LIMIT:
            return DEFAULT_LIMIT
        return self.limit

    def effective_offset(self) -> int:
        return max(self.offset, 0)


@dataclass(frozen=True)
class SummaryFilter:
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    user_id: Optional[UUID] = None
    service_name: Optional[str] = None

    def matches(self, user_id: UUID, service_name: str) -> bool:
        if self.user_id is not None and user_id != self.user_id:
            return False
        if self.service_name is not None and service_name != self.service_name:
            return False
        return True
