from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

@dataclass
class Subscription:
    service_name: str
    price: int
    user_id: UUID
    start_date: datetime
    end_date: Optional[datetime] = None
    id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def is_active_in(self, month: datetime) -> bool:
        if self.start_date > month:
            return False
        return self.end_date is None or self.end_date >= month
