from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status

from src.subtrack.api.deps import get_subscription_service
from src.subtrack.api.schemas import (
    ErrorResponse,
    SubscriptionRequest,
    SubscriptionResponse,
    SummaryResponse,
    subscription_to_response,
)
from src.subtrack.domain.errors import SubscriptionError
from src.subtrack.domain.services.month_date import parse_month
from src.subtrack.domain.value_objects import ListFilter, SummaryFilter
from src.subtrack.services.subscription_service import SubscriptionService


router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])

_BAD_REQUEST = {400: {"model": ErrorResponse}}
_NOT_FOUND = {400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}}


def _parse_uuid(value: str, detail: str) -> UUID:
    try:
        return UUID(value)
    except ValueError:
        raise SubscriptionError.invalid_argument(detail) from None


def _optional_uuid(value: Optional[str]) -> Optional[UUID]:
    return _parse_uuid(value, "invalid user_id") if value else None


def _lenient_int(value: Optional[str]) -> int:
    # нечисловые limit/offset просто игнорируются
    try:
        return int(value) if value else 0
    except ValueError:
        return 0


@router.post(
    "",
    response_model=SubscriptionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={**_BAD_REQUEST, 409: {"model": ErrorResponse}},
)
def create_subscription(
    req: SubscriptionRequest,
    svc: SubscriptionService = Depends(get_subscription_service),
):
    return subscription_to_response(svc.create(req.to_input()))


@router.get("", response_model=list[SubscriptionResponse])
def list_subscriptions(
    user_id: Optional[str] = None,
    service_name: Optional[str] = None,
    limit: Optional[str] = None,
    offset: Optional[str] = None,
    svc: SubscriptionService = Depends(get_subscription_service),
):
    flt = ListFilter(
        user_id=_optional_uuid(user_id),
        service_name=service_name or None,
        limit=_lenient_int(limit),
        offset=_lenient_int(offset),
    )
    return [subscription_to_response(s) for s in svc.list(flt)]


@router.get("/summary", response_model=SummaryResponse, responses=_BAD_REQUEST)
def summary(
    start: Optional[str] = None,
    end: Optional[str] = None,
    user_id: Optional[str] = None,
    service_name: Optional[str] = None,
    svc: SubscriptionService = Depends(get_subscription_service),
):
    """
    Суммарная стоимость подписок за период: start/end в формате MM-YYYY (например 07-2025).
    """
    if not start or not end:
        raise SubscriptionError.invalid_argument("start and end are required")

    flt = SummaryFilter(
        start=parse_month(start),
        end=parse_month(end),
        user_id=_optional_uuid(user_id),
        service_name=service_name or None,
    )
    return SummaryResponse(total=svc.summary(flt))


@router.get("/{subscription_id}", response_model=SubscriptionResponse, responses=_NOT_FOUND)
def get_subscription(
    subscription_id: str,
    svc: SubscriptionService = Depends(get_subscription_service),
):
    sub_id = _parse_uuid(subscription_id, "invalid id")
    return subscription_to_response(svc.get(sub_id))


@router.put("/{subscription_id}", response_model=SubscriptionResponse, responses=_NOT_FOUND)
def update_subscription(
    subscription_id: str,
    req: SubscriptionRequest,
    svc: SubscriptionService = Depends(get_subscription_service),
):
    sub_id = _parse_uuid(subscription_id, "invalid id")
    return subscription_to_response(svc.update(sub_id, req.to_input()))


@router.delete(
    "/{subscription_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=_NOT_FOUND,
)
def delete_subscription(
    subscription_id: str,
    svc: SubscriptionService = Depends(get_subscription_service),
):
    sub_id = _parse_uuid(subscription_id, "invalid id")
    svc.delete(sub_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
