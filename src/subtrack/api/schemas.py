from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, StrictInt

from src.subtrack.domain.entities.subscription import Subscription
from src.subtrack.domain.services.month_date import format_month
from src.subtrack.domain.value_objects import SubscriptionInput


# Subscriptions
class SubscriptionRequest(BaseModel):
    service_name: str = Field(..., examples=["Yandex Plus"])
    price: StrictInt = Field(..., description="Стоимость в месяц, целое > 0", examples=[400])
    user_id: str = Field(..., examples=["60601fee-2bf1-4721-ae6f-7636e79a0cba"])
    start_date: str = Field(..., description="MM-YYYY", examples=["07-2025"])
    end_date: Optional[str] = Field(None, description="MM-YYYY", examples=["12-2025"])

    def to_input(self) -> SubscriptionInput:
        return SubscriptionInput(
            service_name=self.service_name,
            price=self.price,
            user_id=self.user_id,
            start_date=self.start_date,
            end_date=self.end_date,
        )


class SubscriptionResponse(BaseModel):
    id: str
    service_name: str
    price: int
    user_id: str
    start_date: str
    end_date: Optional[str] = None
    created_at: str
    updated_at: str


class SummaryResponse(BaseModel):
    total: int


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str = "ok"


def _rfc3339(dt: Optional[datetime]) -> str:
    if dt is None:
        return ""
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


# Маппер домен -> API DTO
def subscription_to_response(sub: Subscription) -> SubscriptionResponse:
    return SubscriptionResponse(
        id=str(sub.id),
        service_name=sub.service_name,
        price=sub.price,
        user_id=str(sub.user_id),
        start_date=format_month(sub.start_date),
        end_date=format_month(sub.end_date) if sub.end_date is not None else None,
        created_at=_rfc3339(sub.created_at),
        updated_at=_rfc3339(sub.updated_at),
    )
