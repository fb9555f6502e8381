from uuid import UUID

from src.subtrack.domain.entities.subscription import Subscription
from src.subtrack.domain.errors import SubscriptionError
from src.subtrack.domain.services.month_date import parse_month
from src.subtrack.domain.value_objects import SubscriptionInput

MIN_SERVICE_NAME_LEN = 3


def validate_input(data: SubscriptionInput) -> Subscription:
    """
    Сырые поля -> валидная подписка без id и timestamps.
    Проверки идут по порядку, первая же ошибка возвращается как INVALID_ARGUMENT.
    """
    name = (data.service_name or "").strip()
    if len(name) < MIN_SERVICE_NAME_LEN:
        raise SubscriptionError.invalid_argument("service_name must be at least 3 characters")

    if isinstance(data.price, bool) or not isinstance(data.price, int) or data.price <= 0:
        raise SubscriptionError.invalid_argument("price must be positive integer")

    try:
        user_id = UUID(str(data.user_id))
    except ValueError:
        raise SubscriptionError.invalid_argument("invalid user_id") from None
    if user_id.int == 0:
        raise SubscriptionError.invalid_argument("user_id is required")

    start = parse_month(data.start_date)

    end = None
    if data.end_date is not None and data.end_date.strip():
        end = parse_month(data.end_date)

    if end is not None and end < start:
        raise SubscriptionError.invalid_argument("end_date must be after start_date")

    return Subscription(
        service_name=name,
        price=data.price,
        user_id=user_id,
        start_date=start,
        end_date=end,
    )
